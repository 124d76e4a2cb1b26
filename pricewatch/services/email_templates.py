"""HTML bodies for notification emails."""

from decimal import Decimal
from html import escape

from pricewatch.domain.rules import price_difference

_STYLE = """
    body { font-family: Arial, sans-serif; background-color: #f4f4f4; padding: 20px; }
    .container { max-width: 600px; margin: 0 auto; background: #ffffff; padding: 20px;
                 border-radius: 10px; box-shadow: 0 0 10px rgba(0, 0, 0, 0.1); }
    .header { text-align: center; color: #333; }
    .price { color: #d9534f; font-weight: bold; }
    .button { display: inline-block; padding: 10px 20px; margin-top: 20px; color: #fff;
              background-color: #5cb85c; text-decoration: none; border-radius: 5px; }
"""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>{_STYLE}</style>
</head>
<body>
    <div class="container">
{body}
    </div>
</body>
</html>
"""


def price_drop_html(name: str, old_price: Decimal, new_price: Decimal, url: str) -> str:
    difference = price_difference(old_price, new_price)
    body = f"""        <h2 class="header">Price Change Alert!</h2>
        <p>The price of <strong>{escape(name)}</strong> has changed.</p>
        <p>Old Price: <span class="price">${old_price}</span></p>
        <p>New Price: <span class="price">${new_price}</span></p>
        <p>That's a difference of <strong>${difference}</strong>!</p>
        <a href="{escape(url, quote=True)}" class="button">View Product</a>"""
    return _page("Price Change Alert", body)


def product_added_html(name: str, price: Decimal, url: str) -> str:
    body = f"""        <h2 class="header">New Product Added for Tracking</h2>
        <p>A new product has been successfully added to your tracking list.</p>
        <p><strong>Product Name:</strong> {escape(name)}</p>
        <p><strong>Current Price:</strong> ${price}</p>
        <p>You will receive alerts when its price drops.</p>
        <a href="{escape(url, quote=True)}" class="button">View Product</a>"""
    return _page("New Product Tracked", body)
