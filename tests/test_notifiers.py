# tests/test_notifiers.py

"""Tests for message formatting and the notifier implementations."""

import io
import smtplib
import unittest
from unittest.mock import MagicMock, patch

from rich.console import Console

from clearance_watch.errors import ConfigError, NotifyError
from clearance_watch.models.record import Record
from clearance_watch.notify.console_notifier import (
    ConsoleNotifier,
    build_differences_table,
)
from clearance_watch.notify.email_notifier import EmailNotifier
from clearance_watch.notify.formatters import (
    format_price,
    mute_link,
    render_html_table,
    render_plain_text,
)
from clearance_watch.notify.notifier import build_notifier

MUTE_BASE = "https://watch.example/api/mute/"


def _diffs() -> list[Record]:
    return [
        Record(
            name="GPU-A",
            item_id="1",
            price=250.0,
            original_price=399.99,
            image="https://img/1.jpg",
            url="https://shop/1",
            old_price=300.0,
        ),
        Record(
            name="SSD <C> & co",
            item_id="3",
            price=1299.5,
            url="https://shop/3",
        ),
    ]


def _email(**overrides: object) -> EmailNotifier:
    params: dict[str, object] = {
        "host": "smtp.example.com",
        "port": 587,
        "username": "bot@example.com",
        "password": "secret",
        "sender": "bot@example.com",
        "recipients": ["me@example.com", "you@example.com"],
        "subject": "Clearance changes",
        "mute_link_base": MUTE_BASE,
    }
    params.update(overrides)
    return EmailNotifier(**params)  # type: ignore[arg-type]


class TestFormatters(unittest.TestCase):
    """Price formatting and message bodies."""

    def test_format_price(self) -> None:
        """Thousands separators and two decimals."""
        self.assertEqual(format_price(1299.5), "$1,299.50")
        self.assertEqual(format_price(0.0), "$0.00")
        self.assertEqual(format_price(None), "—")

    def test_mute_link(self) -> None:
        """The id is appended to the configured base."""
        self.assertEqual(mute_link(MUTE_BASE, "42"), MUTE_BASE + "42")

    def test_html_table_has_one_row_per_difference(self) -> None:
        """Header plus a row per item, with ignore links."""
        html = render_html_table(_diffs(), MUTE_BASE)
        self.assertTrue(html.startswith("<table"))
        self.assertIn("<th>Prev Price</th>", html)
        self.assertEqual(html.count("<tr>"), 2)
        self.assertIn(f'href="{MUTE_BASE}1"', html)
        self.assertIn(f'href="{MUTE_BASE}3"', html)
        self.assertIn("<b>$250.00</b>", html)
        self.assertIn("<td>$300.00</td>", html)

    def test_html_escapes_names(self) -> None:
        """Markup in item names is escaped."""
        html = render_html_table(_diffs(), MUTE_BASE)
        self.assertIn("SSD &lt;C&gt; &amp; co", html)
        self.assertNotIn("<C>", html)

    def test_plain_text_tags(self) -> None:
        """Drops and new items are labelled."""
        text = render_plain_text(_diffs())
        lines = text.splitlines()
        self.assertTrue(lines[0].startswith("[DROP] GPU-A: $250.00"))
        self.assertIn("[NEW] SSD <C> & co: $1,299.50", text)
        self.assertIn("https://shop/3", text)


class TestEmailNotifier(unittest.TestCase):
    """EmailNotifier message building and sending."""

    def test_build_message_headers_and_parts(self) -> None:
        """The message is multipart with plain and HTML bodies."""
        msg = _email().build_message(_diffs())
        self.assertEqual(msg["Subject"], "Clearance changes")
        self.assertEqual(msg["To"], "me@example.com, you@example.com")
        self.assertTrue(msg.is_multipart())
        html_part = msg.get_body(preferencelist=("html",))
        assert html_part is not None
        self.assertIn(MUTE_BASE + "1", html_part.get_content())

    def test_sender_defaults_to_username(self) -> None:
        """An empty sender falls back to the login name."""
        self.assertEqual(_email(sender="").sender, "bot@example.com")

    @patch("clearance_watch.notify.email_notifier.smtplib.SMTP")
    def test_starttls_on_587(self, mock_smtp: MagicMock) -> None:
        """Port 587 logs in after STARTTLS and sends once."""
        server = mock_smtp.return_value.__enter__.return_value

        _email().notify(_diffs())

        mock_smtp.assert_called_once()
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("bot@example.com", "secret")
        server.send_message.assert_called_once()

    @patch("clearance_watch.notify.email_notifier.smtplib.SMTP_SSL")
    def test_ssl_on_other_ports(self, mock_ssl: MagicMock) -> None:
        """Any other port uses implicit TLS."""
        server = mock_ssl.return_value.__enter__.return_value
        _email(port=465).notify(_diffs())
        server.send_message.assert_called_once()

    def test_incomplete_config_raises(self) -> None:
        """Missing credentials fail before connecting."""
        with patch(
            "clearance_watch.notify.email_notifier.smtplib.SMTP"
        ) as mock_smtp:
            with self.assertRaises(NotifyError):
                _email(password="").notify(_diffs())
            with self.assertRaises(NotifyError):
                _email(recipients=[]).notify(_diffs())
        mock_smtp.assert_not_called()

    @patch("clearance_watch.notify.email_notifier.smtplib.SMTP")
    def test_smtp_failure_raises_notify_error(
        self, mock_smtp: MagicMock
    ) -> None:
        """SMTP errors are wrapped in NotifyError."""
        server = mock_smtp.return_value.__enter__.return_value
        server.login.side_effect = smtplib.SMTPAuthenticationError(
            535, b"bad credentials"
        )
        with self.assertRaises(NotifyError) as ctx:
            _email().notify(_diffs())
        self.assertIn("Failed to send email", str(ctx.exception))

    @patch("clearance_watch.notify.email_notifier.smtplib.SMTP")
    def test_connection_failure_raises_notify_error(
        self, mock_smtp: MagicMock
    ) -> None:
        """Network errors are wrapped in NotifyError."""
        mock_smtp.side_effect = ConnectionRefusedError("refused")
        with self.assertRaises(NotifyError):
            _email().notify(_diffs())


class TestConsoleNotifier(unittest.TestCase):
    """ConsoleNotifier and the Rich table builder."""

    def test_table_rows(self) -> None:
        """One row per record."""
        table = build_differences_table(_diffs())
        self.assertEqual(table.row_count, 2)
        self.assertEqual(len(table.columns), 7)

    def test_notify_prints_items(self) -> None:
        """Item names appear in the console output."""
        buf = io.StringIO()
        console = Console(file=buf, width=200, force_terminal=False)
        ConsoleNotifier(console=console).notify(_diffs())
        output = buf.getvalue()
        self.assertIn("GPU-A", output)
        self.assertIn("$1,299.50", output)


class TestBuildNotifier(unittest.TestCase):
    """build_notifier registry lookup."""

    def test_console(self) -> None:
        """'console' builds a ConsoleNotifier."""
        self.assertIsInstance(build_notifier("console"), ConsoleNotifier)

    def test_email_case_insensitive(self) -> None:
        """Names are matched case-insensitively."""
        self.assertIsInstance(build_notifier(" Email "), EmailNotifier)

    def test_unknown_raises(self) -> None:
        """Unknown names list the valid choices."""
        with self.assertRaises(ConfigError) as ctx:
            build_notifier("pager")
        self.assertIn("email, console", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
