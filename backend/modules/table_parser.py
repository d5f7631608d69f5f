"""
Watchlist Table Parser

Extracts StockRecords from the Stockbit watchlist table (ant-table markup).
Columns are matched by header label, never by position, so reordered,
added or removed columns between passes are tolerated.
"""
import logging
from typing import List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

import config
from modules.ruleset import StockRecord
from modules.value_normalizer import normalize

logger = logging.getLogger(__name__)

# Column name mappings (lowercased header text -> StockRecord field)
HEADER_FIELD_MAP = {
    'symbol': 'symbol',
    'price': 'price',
    'net foreign buy / sell': 'net_foreign_flow',
    'net foreign buy / sell ma10': 'net_foreign_flow_ma10',
    'net foreign buy / sell ma20': 'net_foreign_flow_ma20',
    '1 week net foreign flow': 'one_week_foreign_flow',
    '1 month net foreign flow': 'one_month_foreign_flow',
    'net foreign buy streak': 'foreign_buy_streak',
    'bandar accum/dist': 'accum_dist_index',
    'bandar value': 'flow_value',
    'bandar value ma 10': 'flow_value_ma10',
    'bandar value ma10': 'flow_value_ma10',
    'bandar value ma 20': 'flow_value_ma20',
    'bandar value ma20': 'flow_value_ma20',
}

EMPTY_CELL_TEXTS = ('', '-', '--', 'loading')


def map_header_to_field(header: str) -> Optional[str]:
    return HEADER_FIELD_MAP.get(header.strip().lower())


def _cells(row: Tag) -> List[Tag]:
    return row.find_all('td', recursive=False)


def body_rows(table: Tag) -> List[Tag]:
    tbody = table.find('tbody')
    if tbody is None:
        return []
    return tbody.find_all('tr', recursive=False)


def is_placeholder_row(row: Tag) -> bool:
    return config.PLACEHOLDER_ROW_CLASS in (row.get('class') or [])


def _sub_element_text(cell: Tag, selector: str) -> str:
    element = cell.select_one(selector)
    return element.get_text().strip() if element is not None else ''


def extract_headers(table: Tag) -> List[str]:
    """
    Extract column headers in column order.

    The label lives in a <p> inside each <th>; cells without one fall back to
    the header cell's own text.
    """
    header_row = table.select_one('thead tr')
    if header_row is None:
        return []

    headers = []
    for th in header_row.find_all('th', recursive=False):
        label = th.find(config.HEADER_LABEL_TAG)
        source = label if label is not None else th
        headers.append(source.get_text().strip().lower())
    return headers


def extract_symbol(cell: Tag) -> str:
    """Symbol is the bold weight-700 <p>; the cell also holds company name and badges."""
    return _sub_element_text(cell, config.SYMBOL_SELECTOR)


def extract_price(cell: Tag) -> Optional[float]:
    """Price is the first bold <p>; the cell also renders the change percentage."""
    return normalize(_sub_element_text(cell, config.PRICE_SELECTOR))


def parse_row(row: Tag, headers: List[str]) -> StockRecord:
    """
    Parse a single row into a StockRecord.

    Cells beyond the header list and unrecognized headers are ignored.
    An empty symbol is returned as "" for the caller to reject.
    """
    values = {'symbol': ''}

    for index, cell in enumerate(_cells(row)):
        if index >= len(headers):
            break
        field_name = map_header_to_field(headers[index])
        if field_name is None:
            continue

        if field_name == 'symbol':
            values['symbol'] = extract_symbol(cell)
        elif field_name == 'price':
            values['price'] = extract_price(cell)
        else:
            values[field_name] = normalize(cell.get_text())

    return StockRecord(**values)


def parse_all(table: Tag) -> List[StockRecord]:
    """Parse every body row, dropping placeholder rows and rows without a symbol."""
    headers = extract_headers(table)
    records = []
    for row in body_rows(table):
        if is_placeholder_row(row):
            continue
        record = parse_row(row, headers)
        if record.symbol:
            records.append(record)
    logger.debug(f"Parsed {len(records)} records using {len(headers)} columns")
    return records


def find_watchlist_table(markup: Union[str, Tag]) -> Optional[Tag]:
    """
    Find the watchlist table: the first <table> carrying an ant-table header.

    Args:
        markup: HTML text or an already parsed BeautifulSoup tree.
    """
    soup = BeautifulSoup(markup, 'html.parser') if isinstance(markup, str) else markup
    if soup.name == 'table' and soup.select_one(config.TABLE_HEAD_SELECTOR) is not None:
        return soup
    for table in soup.find_all('table'):
        if table.select_one(config.TABLE_HEAD_SELECTOR) is not None:
            return table
    return None


def _cell_has_data(cell: Tag) -> bool:
    return cell.get_text().strip().lower() not in EMPTY_CELL_TEXTS


def is_row_ready(row: Tag) -> bool:
    """
    Check whether a row has finished loading.

    A ready row has a symbol, is not a placeholder/skeleton row, has at
    least 3 cells and at least 2 of the first data cells carry a value.
    """
    cells = _cells(row)
    if not cells:
        return False
    if not extract_symbol(cells[0]):
        return False

    if is_placeholder_row(row):
        return False
    for selector in config.LOADING_SELECTORS:
        if row.select_one(selector) is not None:
            return False

    if len(cells) < 3:
        return False

    data_cells_with_content = sum(1 for cell in cells[1:5] if _cell_has_data(cell))
    return data_cells_with_content >= 2


def is_table_ready(table: Tag) -> bool:
    """Table is ready when it has the symbol column and at least one row with a symbol."""
    headers = extract_headers(table)
    if len(headers) < 3 or 'symbol' not in headers:
        return False

    for row in body_rows(table):
        if is_placeholder_row(row):
            continue
        cells = _cells(row)
        if cells and extract_symbol(cells[0]):
            return True
    return False
