import os

from dotenv import load_dotenv

load_dotenv()

# Logging
LOG_LEVEL = os.getenv("SCREENER_LOG_LEVEL", "INFO").upper()

# API Settings
API_TITLE = "Watchlist Screener API"
API_VERSION = "1.0.0"
API_HOST = os.getenv("SCREENER_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("SCREENER_API_PORT", "8000"))

# Watchlist table structure (Stockbit ant-table)
TABLE_HEAD_SELECTOR = os.getenv("SCREENER_TABLE_HEAD_SELECTOR", ".ant-table-thead")
HEADER_LABEL_TAG = os.getenv("SCREENER_HEADER_LABEL_TAG", "p")
SYMBOL_SELECTOR = os.getenv("SCREENER_SYMBOL_SELECTOR", 'p[family="bold"][weight="700"]')
PRICE_SELECTOR = os.getenv("SCREENER_PRICE_SELECTOR", 'p[family="bold"]')
PLACEHOLDER_ROW_CLASS = os.getenv("SCREENER_PLACEHOLDER_ROW_CLASS", "ant-table-placeholder")
LOADING_SELECTORS = [".ant-skeleton", '[class*="loading"]', '[class*="skeleton"]']
