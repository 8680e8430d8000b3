"""Command-line interface for the inventory backend."""

import sys
from datetime import datetime, timedelta
from functools import wraps

import click

from .services.inventory_service import InventoryService
from .utils.config import get_config
from .utils.exceptions import BaseAppException, SessionExpiredError
from .utils.formatting import (
    format_currency,
    format_date,
    get_initials,
    status_display_name,
    truncate,
)


def _session_expired(login_path: str):
    click.echo(
        click.style(f"✗ Session expired ({login_path}). Run `inventory-client login`.", fg="red"),
        err=True
    )


def _service() -> InventoryService:
    return InventoryService(on_unauthorized=_session_expired)


def _fail(message: str):
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)
    sys.exit(1)


def handle_errors(func):
    """Turn application errors into a red message and exit code 1."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SessionExpiredError:
            sys.exit(1)
        except BaseAppException as e:
            _fail(e.message)
        except (ValueError, LookupError) as e:
            _fail(str(e))
    return wrapper


def _check_error(service):
    """Fetches don't raise; surface a failed fetch the same way."""
    if service.error:
        _fail(service.error)


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """
    Inventory management client.

    Warehouse, store floor, point-of-sale and demand forecasts.
    """
    pass


# ------------------------------------------------------------------
# Session
# ------------------------------------------------------------------

@cli.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@handle_errors
def login(email: str, password: str):
    """Log in and keep the access token for later commands."""
    with _service() as service:
        service.auth.login(email, password)
    click.echo(click.style(f"✓ Logged in as {email} [{get_initials(email)}]", fg="green", bold=True))


@cli.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@handle_errors
def register(email: str, password: str):
    """Create an account; a verification code is sent by e-mail."""
    with _service() as service:
        user = service.auth.register(email, password)
    click.echo(click.style(f"✓ Registered {user.email}. Check your inbox for the code.", fg="green"))


@cli.command()
@click.option("--email", prompt=True)
@click.option("--code", prompt=True)
@handle_errors
def verify(email: str, code: str):
    """Confirm an account with the e-mailed code."""
    with _service() as service:
        service.auth.verify(email, code)
    click.echo(click.style("✓ Account verified", fg="green"))


@cli.command()
@handle_errors
def logout():
    """End the session and forget the stored token."""
    with _service() as service:
        service.auth.logout()
    click.echo("Logged out.")


@cli.command()
def status():
    """Show whether a session token is stored."""
    with _service() as service:
        if service.auth.check_auth():
            click.echo(click.style("✓ Authenticated", fg="green"))
        else:
            click.echo(click.style("✗ Not logged in", fg="yellow"))
            sys.exit(1)


@cli.command("config-info")
def config_info():
    """Display current configuration settings."""
    config = get_config()

    click.echo("Configuration Settings:")
    click.echo("=" * 60)
    click.echo(f"  Environment:     {config.env.environment}")
    click.echo(f"  API base URL:    {config.env.api_base_url}")
    click.echo(f"  Token file:      {config.env.token_file}")
    click.echo(f"  Log level:       {config.logging.level}")
    click.echo(f"  Timeout:         {config.api.timeout}s")
    click.echo(f"  Max attempts:    {config.api.max_retries}")
    click.echo(f"  Re-fetch delay:  {config.refresh.refetch_delay}s")
    click.echo()
    click.echo("Freshness windows:")
    for key, window in sorted(config.cache.windows.items()):
        click.echo(f"  {key:<24} {window:>6.0f}s")


@cli.command()
@handle_errors
def dashboard():
    """Headline numbers across warehouse and store."""
    with _service() as service:
        stats = service.dashboard.fetch_stats()
        _check_error(service.dashboard)

    click.echo(f"Products:            {stats.total_products}")
    click.echo(f"In warehouse:        {stats.products_in_warehouse}")
    click.echo(f"In store:            {stats.products_in_store}")
    click.echo(click.style(
        f"Expiring this week:  {stats.products_expiring_soon}",
        fg="red" if stats.products_expiring_soon else None
    ))
    click.echo(f"Revenue (30 days):   {format_currency(stats.total_revenue_last_30_days)}")
    click.echo(f"Units sold (30 days): {stats.total_sales_last_30_days}")


# ------------------------------------------------------------------
# Warehouse
# ------------------------------------------------------------------

def _echo_warehouse_items(items):
    if not items:
        click.echo("No items.")
        return
    for item in items:
        name = truncate(item.product.name, 30) if item.product else item.product_sid
        expiry = format_date(item.expire_date) if item.expire_date else "-"
        urgency = item.urgency_level.value if item.urgency_level else "-"
        color = {"critical": "red", "urgent": "yellow"}.get(urgency)
        click.echo(click.style(
            f"{item.sid:<12} {name:<32} {item.quantity:>6}  {expiry:<13} "
            f"{status_display_name(item.status.value):<15} {urgency}",
            fg=color
        ))


@cli.group()
def warehouse():
    """Inbound warehouse inventory."""
    pass


@warehouse.command("list")
@handle_errors
def warehouse_list():
    """List warehouse items."""
    with _service() as service:
        items = service.warehouse.fetch_items()
        _check_error(service.warehouse)
    _echo_warehouse_items(items)


@warehouse.command("expiring")
@handle_errors
def warehouse_expiring():
    """List warehouse items close to expiry."""
    with _service() as service:
        items = service.warehouse.fetch_expiring_items()
        _check_error(service.warehouse)
    _echo_warehouse_items(items)


@warehouse.command("upload")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@handle_errors
def warehouse_upload(path: str):
    """Import a delivery file."""
    with _service() as service:
        upload = service.warehouse.upload_file(path)
    click.echo(click.style(
        f"✓ Imported {upload.rows_imported} rows from {upload.file_name}", fg="green"
    ))


@warehouse.command("move")
@click.argument("item_sid")
@click.option("--quantity", "-q", type=int, required=True)
@click.option("--price", "-p", type=float, required=True)
@handle_errors
def warehouse_move(item_sid: str, quantity: int, price: float):
    """Move units of a warehouse item to the store floor."""
    with _service() as service:
        result = service.warehouse.move_to_store(item_sid, quantity, price)
    click.echo(click.style(f"✓ {result.message or 'Moved'} ({result.store_item_sid})", fg="green"))


@warehouse.command("move-barcode")
@click.argument("barcode")
@click.option("--quantity", "-q", type=int, required=True)
@click.option("--price", "-p", type=float, required=True)
@handle_errors
def warehouse_move_barcode(barcode: str, quantity: int, price: float):
    """Move units to the store floor by product barcode."""
    with _service() as service:
        result = service.warehouse.move_to_store_by_barcode(barcode, quantity, price)
    click.echo(click.style(f"✓ {result.message or 'Moved'} ({result.store_item_sid})", fg="green"))


@warehouse.command("delete")
@click.argument("item_sid")
@click.option("--quantity", "-q", type=int, required=True)
@handle_errors
def warehouse_delete(item_sid: str, quantity: int):
    """Write off units of a warehouse item."""
    with _service() as service:
        service.warehouse.partial_delete_item(item_sid, quantity)
    click.echo(click.style(f"✓ Wrote off {quantity} units of {item_sid}", fg="green"))


# ------------------------------------------------------------------
# Store
# ------------------------------------------------------------------

def _echo_store_items(items):
    if not items:
        click.echo("No items.")
        return
    for item in items:
        name = truncate(item.product.name, 30) if item.product else item.sid
        discount = f"-{item.best_discount:g}%" if item.best_discount else ""
        expiry = format_date(item.expire_date) if item.expire_date else "-"
        click.echo(
            f"{item.sid:<12} {name:<32} {item.quantity:>6}  "
            f"{format_currency(item.price):>10} {discount:<5} {expiry}"
        )


@cli.group()
def store():
    """Store floor and sales."""
    pass


@store.command("list")
@handle_errors
def store_list():
    """List active store items."""
    with _service() as service:
        items = service.store.fetch_active_items()
        _check_error(service.store)
    _echo_store_items(items)


@store.command("expired")
@handle_errors
def store_expired():
    """List expired store items."""
    with _service() as service:
        items = service.store.fetch_expired_items()
        _check_error(service.store)
    _echo_store_items(items)


@store.command("removed")
@handle_errors
def store_removed():
    """List items taken off the floor."""
    with _service() as service:
        items = service.store.fetch_removed_items()
        _check_error(service.store)
    for item in items:
        click.echo(
            f"{item.sid:<12} {item.quantity:>6}  lost {format_currency(item.lost_value):>10}  "
            f"{item.removal_reason}"
        )


@store.command("sell")
@click.argument("store_item_sid", required=False)
@click.option("--barcode", "-b", help="Sell by product barcode instead of item id")
@click.option("--quantity", "-q", type=int, required=True)
@click.option("--price", "-p", type=float, help="Unit price (default: shelf price less discount)")
@handle_errors
def store_sell(store_item_sid, barcode, quantity, price):
    """Record a sale."""
    if not store_item_sid and not barcode:
        _fail("Give a store item id or --barcode")

    with _service() as service:
        if barcode:
            sale = service.store.sell_by_barcode(barcode, quantity, price)
        else:
            if price is None:
                _fail("--price is required when selling by item id")
            sale = service.store.record_sale(store_item_sid, quantity, price)

    total = sale.total_amount if sale.total_amount is not None else sale.sold_qty * sale.sold_price
    click.echo(click.style(f"✓ Sold {sale.sold_qty} for {format_currency(total)}", fg="green"))


@store.command("discount")
@click.argument("store_item_sid")
@click.option("--percentage", "-d", type=float, required=True)
@click.option("--days", type=int, default=7, show_default=True, help="How long the discount runs")
@handle_errors
def store_discount(store_item_sid: str, percentage: float, days: int):
    """Discount a store item starting now."""
    starts_at = datetime.now()
    ends_at = starts_at + timedelta(days=days)
    with _service() as service:
        discount = service.store.create_discount(store_item_sid, percentage, starts_at, ends_at)
    click.echo(click.style(
        f"✓ {discount.percentage:g}% discount until {format_date(discount.ends_at or ends_at)}",
        fg="green"
    ))


@store.command("expire")
@click.argument("store_item_sid")
@handle_errors
def store_expire(store_item_sid: str):
    """Mark a store item as expired."""
    with _service() as service:
        service.store.mark_as_expired(store_item_sid)
    click.echo(click.style(f"✓ {store_item_sid} marked as expired", fg="green"))


@store.command("remove")
@click.argument("store_item_sid")
@handle_errors
def store_remove(store_item_sid: str):
    """Take a store item off the floor."""
    with _service() as service:
        service.store.remove_from_store(store_item_sid)
    click.echo(click.style(f"✓ {store_item_sid} removed", fg="green"))


@store.command("reports")
@click.option("--start", type=click.DateTime(), help="Period start")
@click.option("--end", type=click.DateTime(), help="Period end")
@handle_errors
def store_reports(start, end):
    """Sales, discount and write-off summary."""
    with _service() as service:
        reports = service.store.fetch_reports(start, end)
        _check_error(service.store)

    summary = reports.summary
    click.echo(f"Revenue:           {format_currency(summary.total_sales)}")
    click.echo(f"Units sold:        {summary.total_items_sold}")
    click.echo(f"Discount savings:  {format_currency(summary.total_discount_savings)}")
    click.echo(click.style(
        f"Written off:       {summary.total_removed_items} items, "
        f"{format_currency(summary.total_removed_value)}",
        fg="red" if summary.total_removed_items else None
    ))


# ------------------------------------------------------------------
# Cart
# ------------------------------------------------------------------

@cli.group()
def cart():
    """Point-of-sale cart."""
    pass


@cart.command("list")
@handle_errors
def cart_list():
    """Show the cart."""
    with _service() as service:
        items = service.cart.fetch_cart()
        _check_error(service.cart)
        for item in items:
            name = item.product.name if item.product else item.store_item_sid
            click.echo(
                f"{item.sid:<12} {truncate(name, 30):<32} {item.quantity:>4} x "
                f"{format_currency(item.price_per_unit)} = {format_currency(item.line_total)}"
            )
        click.echo("─" * 60)
        click.echo(f"{service.cart.total_items} items, {format_currency(service.cart.total_amount)}")


@cart.command("add")
@click.argument("store_item_sid")
@click.option("--quantity", "-q", type=int, default=1, show_default=True)
@handle_errors
def cart_add(store_item_sid: str, quantity: int):
    """Put a store item in the cart."""
    with _service() as service:
        service.cart.add_to_cart(store_item_sid, quantity)
        click.echo(click.style(f"✓ Cart: {service.cart.total_items} items", fg="green"))


@cart.command("remove")
@click.argument("cart_item_sid")
@handle_errors
def cart_remove(cart_item_sid: str):
    """Take an item out of the cart."""
    with _service() as service:
        service.cart.remove_from_cart(cart_item_sid)
    click.echo(click.style(f"✓ Removed {cart_item_sid} from cart", fg="green"))


@cart.command("checkout")
@handle_errors
def cart_checkout():
    """Sell everything in the cart."""
    with _service() as service:
        service.cart.fetch_cart()
        result = service.cart.checkout_cart()
    click.echo(click.style(
        f"✓ Sold {result.items_count} items for {format_currency(result.total_amount)}",
        fg="green", bold=True
    ))


# ------------------------------------------------------------------
# Prediction
# ------------------------------------------------------------------

@cli.group()
def prediction():
    """Demand forecasts."""
    pass


@prediction.command("forecast")
@click.argument("product_sid")
@click.option("--timeframe", type=click.Choice(["day", "week", "month"]), default="month", show_default=True)
@click.option("--periods", type=int, default=3, show_default=True)
@click.option("--refresh", is_flag=True, help="Ask the backend to recompute")
@handle_errors
def prediction_forecast(product_sid: str, timeframe: str, periods: int, refresh: bool):
    """Forecast demand for a product."""
    with _service() as service:
        points = service.prediction.fetch_forecast(product_sid, refresh, timeframe, periods)
        _check_error(service.prediction)

    if not points:
        click.echo("No forecast available.")
        return
    for point in points:
        bounds = ""
        if point.lower_bound is not None and point.upper_bound is not None:
            bounds = f"  [{point.lower_bound:.1f} – {point.upper_bound:.1f}]"
        click.echo(
            f"{format_date(point.period_start)} – {format_date(point.period_end)}: "
            f"{point.forecast_qty:.1f}{bounds}"
        )


@prediction.command("stats")
@click.option("--product", "product_sid", help="Restrict to one product")
@handle_errors
def prediction_stats(product_sid):
    """Sales history used by the forecasts."""
    with _service() as service:
        stats = service.prediction.fetch_stats(product_sid)
        _check_error(service.prediction)
    click.echo(f"Dates:      {len(stats.dates)}")
    click.echo(f"Products:   {len(stats.products)}")
    click.echo(f"Categories: {len(stats.categories)}")


@prediction.command("products")
@click.option("--category", "category_sid")
@click.option("--search")
@handle_errors
def prediction_products(category_sid, search):
    """List products."""
    with _service() as service:
        products = service.prediction.fetch_products(category_sid, search)
        _check_error(service.prediction)
    for product in products:
        click.echo(f"{product.sid:<12} {product.name:<32} {product.category_name}")


@prediction.command("categories")
@handle_errors
def prediction_categories():
    """List product categories."""
    with _service() as service:
        categories = service.prediction.fetch_categories()
        _check_error(service.prediction)
    for category in categories:
        click.echo(f"{category.sid:<12} {category.name}")


@prediction.command("insights")
@handle_errors
def prediction_insights():
    """Backend-generated insights."""
    with _service() as service:
        insights = service.prediction.fetch_insights()
        _check_error(service.prediction)
    for key, value in insights.items():
        click.echo(f"{key}: {value}")


if __name__ == "__main__":
    cli()
