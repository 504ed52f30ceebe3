"""Public storefront pages."""

import logging
from typing import Optional, Union

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from werkzeug.wrappers import Response

from ..api_client import ApiError, ApiNotFound, get_api_client
from ..carousel import Carousel
from ..catalog import (
    ALL_CATEGORIES,
    DEFAULT_SORT,
    SORT_OPTIONS,
    apply_catalog_view,
    available_categories,
    new_arrivals,
    related_products,
    sort_faqs,
)
from ..config import FEATURED_LIMIT, NEW_ARRIVALS_LIMIT, RELATED_LIMIT
from ..forms import ContactForm, FormErrors
from ..logging_config import log_api_event
from ..models import Placeholder
from . import fetch_or_empty

__all__ = ["shop"]

logger = logging.getLogger(__name__)

shop = Blueprint("shop", __name__)

CONTACT_ERROR = "Ошибка при отправке формы. Попробуйте еще раз."

CONTACT_INFO = [
    {"title": "Телефон", "content": "+1 (555) 123-4567", "subtext": "Пн-Пт, 9:00-18:00 EST"},
    {"title": "Email", "content": "sales@sofi.ru", "subtext": "Ответ в течение 24 часов"},
    {"title": "Адрес", "content": "123 Design Avenue", "subtext": "Нью-Йорк, NY 10001, США"},
]

ABOUT_STATS = [
    {"value": "100+", "label": "Довольных клиентов", "description": "Отели по всему миру доверяют нам"},
    {"value": "2+", "label": "Стран обслуживания", "description": "Международное присутствие"},
    {"value": "1+", "label": "Лет опыта", "description": "В индустрии гостеприимства"},
]

HOME_FACTS = [
    "Матрас влияет на качество сна больше, чем площадь номера",
    "Дизайн мебели влияет на оценку отеля на 40%",
    "Текстиль и детали интерьера формируют первое впечатление за 7 секунд",
    "Комфортная кровать — главный критерий положительных отзывов",
    "Гости запоминают интерьер на 60% лучше, чем услуги",
    "Мини-холодильник — маленькая деталь, но большой плюс в глазах гостей",
]

PORTFOLIO_PROJECTS = [
    {"name": "Grand Plaza Hotel", "location": "New York, USA",
     "description": "Furnished 250-room luxury hotel with contemporary design",
     "items": "Beds, Seating, Dining Furniture", "rating": 4.9},
    {"name": "Côte d'Azur Resort", "location": "Cannes, France",
     "description": "Mediterranean-inspired boutique resort with 80 rooms",
     "items": "Resort Furniture, Decor, Accessories", "rating": 4.8},
    {"name": "Asia Pacific Tower", "location": "Singapore",
     "description": "Modern 5-star hotel with 500 guest rooms",
     "items": "Full Suite of Hospitality Furniture", "rating": 4.9},
    {"name": "Desert Oasis Resort", "location": "Dubai, UAE",
     "description": "Luxury desert resort featuring 150 rooms",
     "items": "Premium Beds, Executive Seating", "rating": 4.7},
    {"name": "Alpine Lodge", "location": "Swiss Alps",
     "description": "Boutique mountain hotel with rustic charm",
     "items": "Custom Furniture, Decor Elements", "rating": 4.8},
    {"name": "Tokyo Metropolitan", "location": "Tokyo, Japan",
     "description": "Ultra-modern 600-room luxury hotel",
     "items": "Contemporary Furniture Suite", "rating": 4.9},
]


def _active_placeholder(path: str) -> Optional[Placeholder]:
    """Look up the placeholder for a path; an unreachable API means none."""
    try:
        return get_api_client().check_placeholder(path)
    except ApiError as e:
        logger.error(f"Error checking placeholder for {path}: {e}")
        return None


def _render_placeholder(placeholder: Placeholder) -> str:
    return render_template("shop/placeholder.html", placeholder=placeholder)


# =============================================================================
# Home
# =============================================================================


@shop.route("/", methods=["GET"])
def index() -> str:
    """Home page: categories, featured products, facts, collections, about, FAQ."""
    client = get_api_client()
    categories = fetch_or_empty(client.list_categories, "categories")
    featured = fetch_or_empty(client.list_featured_products, "featured products")
    collections = fetch_or_empty(client.list_collections, "collections")
    faqs = fetch_or_empty(client.list_faqs, "FAQs")
    return render_template(
        "shop/index.html",
        categories=categories,
        featured=featured[:FEATURED_LIMIT],
        collections=collections,
        faqs=sort_faqs(faqs),
        facts=HOME_FACTS,
        stats=ABOUT_STATS,
    )


# =============================================================================
# Catalog
# =============================================================================


@shop.route("/catalog", methods=["GET"])
def catalog() -> str:
    """Product catalog with category filter and sort order from the query string."""
    client = get_api_client()
    products = fetch_or_empty(client.list_products, "products")
    categories = fetch_or_empty(client.list_categories, "categories")

    selected_category = request.args.get("category") or ALL_CATEGORIES
    sort_by = request.args.get("sort") or DEFAULT_SORT
    if sort_by not in dict(SORT_OPTIONS):
        sort_by = DEFAULT_SORT

    visible = apply_catalog_view(products, selected_category, sort_by)
    return render_template(
        "shop/catalog.html",
        products=visible,
        category_options=available_categories(categories, products),
        selected_category=selected_category,
        sort_by=sort_by,
        sort_options=SORT_OPTIONS,
        all_categories=ALL_CATEGORIES,
    )


@shop.route("/products/<product_id>", methods=["GET"])
def product_detail(product_id: str) -> Union[str, tuple]:
    """Product page with image carousel and related products."""
    try:
        pid = int(product_id)
    except ValueError:
        return render_template("shop/product_not_found.html"), 404

    client = get_api_client()
    try:
        product = client.get_product(pid)
    except ApiNotFound:
        return render_template("shop/product_not_found.html"), 404
    except ApiError as e:
        logger.error(f"Error fetching product {pid}: {e}")
        return render_template("shop/product_not_found.html"), 404

    products = fetch_or_empty(client.list_products, "products")
    carousel = Carousel.for_images(product.gallery, request.args.get("image", 0))

    specifications = {
        "Размеры": product.dimensions or "Не указано",
        "Материал": product.material or "Не указано",
        "Цвет": product.color or "Не указано",
    }
    return render_template(
        "shop/product.html",
        product=product,
        carousel=carousel,
        specifications=specifications,
        related=related_products(products, product, RELATED_LIMIT),
    )


# =============================================================================
# Collections
# =============================================================================


@shop.route("/collections", methods=["GET"])
def collections() -> str:
    items = fetch_or_empty(get_api_client().list_collections, "collections")
    return render_template("shop/collections.html", collections=items)


@shop.route("/collections/<collection_id>", methods=["GET"])
def collection_detail(collection_id: str) -> str:
    try:
        cid = int(collection_id)
    except ValueError:
        abort(404)
    try:
        collection = get_api_client().get_collection(cid)
    except ApiNotFound:
        abort(404)
    except ApiError as e:
        logger.error(f"Error fetching collection {cid}: {e}")
        abort(404)
    return render_template("shop/collection.html", collection=collection)


# =============================================================================
# Contact
# =============================================================================


@shop.route("/contact", methods=["GET", "POST"])
def contact() -> Union[str, Response]:
    """Contact form; POST forwards a valid submission to the API."""
    form = ContactForm()
    errors = FormErrors()
    error_message = ""

    if request.method == "POST":
        form = ContactForm.from_form(request.form)
        errors = form.validate()
        if errors:
            log_api_event(
                "form_rejected",
                {"message": "Contact form rejected", "fields": sorted(errors)},
                logger_name=__name__,
            )
        else:
            try:
                get_api_client().submit_contact(form.to_payload())
            except ApiError as e:
                logger.error(f"Error submitting contact form: {e}")
                error_message = CONTACT_ERROR
            else:
                logger.info("Contact form submitted")
                flash("Спасибо! Мы свяжемся с вами в ближайшее время.", "success")
                return redirect(url_for("shop.contact"))

    return render_template(
        "shop/contact.html",
        form=form,
        errors=errors,
        error_message=error_message,
        contact_info=CONTACT_INFO,
    )


# =============================================================================
# Static & placeholder-gated pages
# =============================================================================


@shop.route("/about", methods=["GET"])
def about() -> str:
    return render_template("shop/about.html", stats=ABOUT_STATS)


@shop.route("/new", methods=["GET"])
def new() -> str:
    """New arrivals, unless an admin has put a placeholder on the page."""
    placeholder = _active_placeholder("/new")
    if placeholder:
        return _render_placeholder(placeholder)
    products = fetch_or_empty(get_api_client().list_products, "products")
    return render_template("shop/new.html", products=new_arrivals(products, NEW_ARRIVALS_LIMIT))


@shop.route("/portfolio", methods=["GET"])
def portfolio() -> str:
    placeholder = _active_placeholder("/portfolio")
    if placeholder:
        return _render_placeholder(placeholder)
    return render_template("shop/portfolio.html", projects=PORTFOLIO_PROJECTS)


@shop.route("/<path:page_path>", methods=["GET"])
def placeholder_page(page_path: str) -> str:
    """Any other path is served only if an admin configured a placeholder for it."""
    placeholder = _active_placeholder(f"/{page_path}")
    if placeholder is None:
        abort(404)
    return _render_placeholder(placeholder)
