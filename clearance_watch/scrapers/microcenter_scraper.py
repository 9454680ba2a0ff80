# clearance_watch/scrapers/microcenter_scraper.py

"""Scraper for microcenter.com clearance / open-box search results."""

from bs4 import BeautifulSoup
from bs4.element import Tag

from clearance_watch.errors import FetchError
from clearance_watch.models.record import Record
from clearance_watch.scrapers.base_scraper import BaseScraper


class MicrocenterScraper(BaseScraper):
    """Parse the Micro Center search results grid into records.

    Each ``.product_wrapper`` tile carries the product anchor
    (``data-name``, ``data-id``, ``href``), a thumbnail, the current
    price inside ``.price-label`` and the struck-through original
    price in ``.ObStrike``.
    """

    def __init__(self) -> None:
        super().__init__("microcenter")

    def _get_homepage(self) -> str:
        return self.settings.SITE_BASE_URL + "/"

    @staticmethod
    def _require(node: Tag | None, field: str) -> Tag:
        if node is None:
            raise FetchError(f"[microcenter] missing {field} element")
        return node

    @staticmethod
    def _attr(node: Tag, attr: str, field: str) -> str:
        value = node.get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        if not value:
            raise FetchError(f"[microcenter] missing {field} attribute")
        return str(value)

    def _parse_price(self, text: str, field: str) -> float:
        price = self.extract_price(text.replace("$", ""))
        if price is None:
            raise FetchError(
                f"[microcenter] unparseable {field}: {text.strip()!r}"
            )
        return price

    def _parse_tile(self, tile: Tag) -> Record:
        """Parse a single product tile, raising FetchError on gaps."""
        anchor = self._require(
            tile.select_one('[data-list="Search Results"]'),
            "product link",
        )
        name = self._attr(anchor, "data-name", "name")
        item_id = self._attr(anchor, "data-id", "id")
        href = self._attr(anchor, "href", "url")

        image_node = self._require(
            tile.select_one(".SearchResultProductImage"), "image"
        )
        image = self._attr(image_node, "src", "image")

        price_label = self._require(
            tile.select_one(".price-label"), "price"
        )
        price_node = price_label.find(True)
        price_text = (
            price_node.get_text() if isinstance(price_node, Tag) else ""
        )
        price = self._parse_price(price_text, "price")

        original_node = self._require(
            tile.select_one(".ObStrike"), "original price"
        )
        original_price = self._parse_price(
            original_node.get_text(), "original price"
        )

        url = href if href.startswith("http") else (
            self.settings.SITE_BASE_URL + href
        )
        return Record(
            name=name,
            item_id=item_id,
            price=price,
            original_price=original_price,
            image=image,
            url=url,
        )

    def parse_listing(self, soup: BeautifulSoup) -> list[Record]:
        """Extract every product tile in page order."""
        records: list[Record] = []
        for tile in soup.select(".product_wrapper"):
            records.append(self._parse_tile(tile))
        return records

    def fetch_observed(self, source_url: str) -> list[Record]:
        """Fetch the search results page and parse its product tiles."""
        soup = self._get_page(source_url)
        try:
            records = self.parse_listing(soup)
        except FetchError as exc:
            exc.url = source_url
            self.logger.error(
                "[microcenter] Parse failed: %s", exc, exc_info=True
            )
            raise
        self.logger.info(
            "[microcenter] Parsed %d products from %s",
            len(records),
            source_url,
        )
        return records
