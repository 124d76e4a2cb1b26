"""pricewatch - scrape product pages on a schedule and email price drops"""

__version__ = "0.1.0"
