"""Shared fixtures: watchlist HTML in the shape Stockbit renders it."""
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

HEADERS = [
    'Symbol',
    'Price',
    'Net Foreign Buy / Sell',
    'Net Foreign Buy / Sell MA10',
    'Net Foreign Buy / Sell MA20',
    '1 Week Net Foreign Flow',
    '1 Month Net Foreign Flow',
    'Net Foreign Buy Streak',
    'Bandar Accum/Dist',
    'Bandar Value',
    'Bandar Value MA 10',
    'Bandar Value MA 20',
]

# Sample rows as rendered on the watchlist page
ROWS = {
    'ADRO': {
        'Symbol': 'ADRO', 'Price': '2,210',
        'Net Foreign Buy / Sell': '-',
        'Net Foreign Buy / Sell MA10': '45.57 B',
        'Net Foreign Buy / Sell MA20': '43.57 B',
        '1 Week Net Foreign Flow': '40.73 B',
        '1 Month Net Foreign Flow': '871.45 B',
        'Net Foreign Buy Streak': '-',
        'Bandar Accum/Dist': '-30.79',
        'Bandar Value': '(3,219.88 B)',
        'Bandar Value MA 10': '(3,262.06 B)',
        'Bandar Value MA 20': '(3,383.86 B)',
    },
    'BBRI': {
        'Symbol': 'BBRI', 'Price': '3,810',
        'Net Foreign Buy / Sell': '177.65 B',
        'Net Foreign Buy / Sell MA10': '(33.04 B)',
        'Net Foreign Buy / Sell MA20': '26.15 B',
        '1 Week Net Foreign Flow': '(790.38 B)',
        '1 Month Net Foreign Flow': '523.08 B',
        'Net Foreign Buy Streak': '2.00',
        'Bandar Accum/Dist': '14.31',
        'Bandar Value': '(22,156.30 B)',
        'Bandar Value MA 10': '(21,945.38 B)',
        'Bandar Value MA 20': '(22,168.84 B)',
    },
    'TLKM': {
        'Symbol': 'TLKM', 'Price': '3,150',
        'Net Foreign Buy / Sell': '85.20 B',
        'Net Foreign Buy / Sell MA10': '12.40 B',
        'Net Foreign Buy / Sell MA20': '9.75 B',
        '1 Week Net Foreign Flow': '210.10 B',
        '1 Month Net Foreign Flow': '150.00 B',
        'Net Foreign Buy Streak': '5.00',
        'Bandar Accum/Dist': '22.50',
        'Bandar Value': '1,250.00 B',
        'Bandar Value MA 10': '980.00 B',
        'Bandar Value MA 20': '640.25 B',
    },
}


def _header_cell(label: str) -> str:
    return f'<th class="ant-table-cell"><div><p>{label}</p></div></th>'


def _body_cell(label: str, text: str) -> str:
    if label == 'Symbol':
        if not text:
            return '<td class="ant-table-cell"><div><p>Unknown</p></div></td>'
        return (
            '<td class="ant-table-cell"><div class="sc-50150f6d-0">'
            f'<p family="bold" weight="700">{text}</p>'
            '<p family="regular">Company Tbk.</p>'
            '</div></td>'
        )
    if label == 'Price':
        return (
            '<td class="ant-table-cell">'
            f'<p family="bold">{text}</p><p family="regular">+1.25%</p>'
            '</td>'
        )
    return f'<td class="ant-table-cell"><p>{text}</p></td>'


def build_table_html(headers, rows, placeholder=False, wrap_page=True):
    """Render an ant-table with the given header order and row dicts (label -> text)."""
    head = ''.join(_header_cell(h) for h in headers)
    body = []
    if placeholder:
        body.append('<tr class="ant-table-placeholder"><td colspan="3">No data</td></tr>')
    for row in rows:
        cells = ''.join(_body_cell(h, row.get(h, '-')) for h in headers)
        body.append(f'<tr class="ant-table-row">{cells}</tr>')
    table = (
        '<table style="table-layout: auto;">'
        f'<thead class="ant-table-thead"><tr>{head}</tr></thead>'
        f'<tbody class="ant-table-tbody">{"".join(body)}</tbody>'
        '</table>'
    )
    if not wrap_page:
        return table
    return (
        '<html><body>'
        '<table class="layout"><tbody><tr><td>menu</td></tr></tbody></table>'
        f'<div class="ant-table-wrapper">{table}</div>'
        '</body></html>'
    )


@pytest.fixture
def watchlist_html():
    """Factory fixture building watchlist page HTML."""
    return build_table_html


@pytest.fixture
def sample_rows():
    return {symbol: dict(row) for symbol, row in ROWS.items()}


@pytest.fixture
def headers():
    return list(HEADERS)
