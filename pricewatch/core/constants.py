"""
Constants for scraping and tracking operations.
Centralized magic numbers and selector configuration.
"""

# Browser launch profile
BROWSER_LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
]
BROWSER_IGNORE_DEFAULT_ARGS = ["--enable-automation"]
BROWSER_VIEWPORT = {"width": 1920, "height": 1080}
BROWSER_LOCALE = "pt-BR"

# Injected into every page of the shared context
HIDE_WEBDRIVER_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined
});
"""

# Price text cleanup
CURRENCY_TOKENS = ("R$", "US$", "BRL", "USD", "EUR", "$", "€", "£", "¥")
PRICE_LABELS = ("a partir de", "starting at", "por", "from", "ou", "or")

# Email (Resend)
RESEND_API_URL = "https://api.resend.com/emails"
EMAIL_TIMEOUT_SECONDS = 30.0
