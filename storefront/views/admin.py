"""Back-office CRUD screens.

Every mutation is a POST that calls the API and then redirects back to the
list, which is re-fetched. A list therefore only changes once the API has
confirmed the change; on failure the error is flashed and nothing is removed.
"""

import logging
from typing import Callable, List, Optional, Union

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from werkzeug.datastructures import FileStorage
from werkzeug.wrappers import Response

from ..api_client import ApiError, ApiNotFound, get_api_client
from ..catalog import sort_faqs
from ..collection_sync import sync_collection_products
from ..forms import (
    CategoryForm,
    CollectionForm,
    FAQForm,
    FormErrors,
    PlaceholderForm,
    ProductForm,
    validate_dump_upload,
    validate_image_upload,
)
from ..logging_config import log_api_event
from . import fetch_or_empty

__all__ = ["admin"]

logger = logging.getLogger(__name__)

admin = Blueprint("admin", __name__, url_prefix="/admin")

RESTORE_WARNING = (
    "ВНИМАНИЕ! Восстановление дампа полностью заменит текущую базу данных."
)


# =============================================================================
# Helpers
# =============================================================================


def _upload_images(files: List[FileStorage]) -> List[str]:
    """Upload every chosen image; invalid or failed files are flashed and skipped.

    Returns the API paths of the files that were stored.
    """
    client = get_api_client()
    uploaded: List[str] = []
    for file in files:
        if file is None or not file.filename:
            continue
        problem = validate_image_upload(file)
        if problem:
            flash(problem, "error")
            continue
        try:
            uploaded.append(client.upload_image(file.filename, file.stream, file.mimetype))
        except ApiError as e:
            logger.error(f"Error uploading image {file.filename}: {e}")
            flash(f"Ошибка при загрузке {file.filename}", "error")
    return uploaded


def _single_image(current: str) -> str:
    """Resolve the image field of a one-image form (category, collection)."""
    if request.form.get("remove_image") == "on":
        current = ""
    uploaded = _upload_images([request.files.get("image_file")])
    return uploaded[0] if uploaded else current


def _delete(
    delete: Callable[[int], None], item_id: int, what: str, error_message: str, endpoint: str
) -> Response:
    try:
        delete(item_id)
    except ApiError as e:
        logger.error(f"Error deleting {what} {item_id}: {e}")
        flash(error_message, "error")
    else:
        logger.info(f"Deleted {what} {item_id}")
        flash("Удалено", "success")
    return redirect(url_for(endpoint))


def _rejected(form_name: str, errors: FormErrors) -> None:
    log_api_event(
        "form_rejected",
        {"message": f"{form_name} form rejected", "fields": sorted(errors)},
        logger_name=__name__,
    )


# =============================================================================
# Dashboard
# =============================================================================


@admin.route("", methods=["GET"])
@admin.route("/", methods=["GET"])
def dashboard() -> str:
    """Counts of the main entities; each is fetched independently."""
    client = get_api_client()
    stats = {
        "products": len(fetch_or_empty(client.list_products, "products")),
        "categories": len(fetch_or_empty(client.list_categories, "categories")),
        "collections": len(fetch_or_empty(client.list_collections, "collections")),
    }
    return render_template("admin/dashboard.html", stats=stats)


# =============================================================================
# Products
# =============================================================================


@admin.route("/products", methods=["GET"])
def products() -> str:
    items = fetch_or_empty(get_api_client().list_products, "products")
    return render_template("admin/products.html", products=items)


def _product_editor(product_id: Optional[int]) -> Union[str, Response]:
    client = get_api_client()
    errors = FormErrors()

    if request.method == "POST":
        form = ProductForm.from_form(request.form)
        errors = form.validate()
        if errors:
            _rejected("Product", errors)
        else:
            form.images.extend(_upload_images(request.files.getlist("new_images")))
            try:
                if product_id is None:
                    client.create_product(form.to_payload())
                else:
                    client.update_product(product_id, form.to_payload())
            except ApiError as e:
                logger.error(f"Error saving product {product_id}: {e}")
                flash(
                    "Ошибка при создании товара" if product_id is None
                    else "Ошибка при обновлении товара",
                    "error",
                )
            else:
                flash("Товар сохранен", "success")
                return redirect(url_for("admin.products"))
    elif product_id is not None:
        try:
            form = ProductForm.from_product(client.get_product(product_id))
        except ApiNotFound:
            abort(404)
        except ApiError as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            flash("Ошибка при загрузке товара", "error")
            return redirect(url_for("admin.products"))
    else:
        form = ProductForm()

    return render_template(
        "admin/product_form.html", form=form, errors=errors, product_id=product_id
    )


@admin.route("/products/new", methods=["GET", "POST"])
def product_new() -> Union[str, Response]:
    return _product_editor(None)


@admin.route("/products/<int:product_id>/edit", methods=["GET", "POST"])
def product_edit(product_id: int) -> Union[str, Response]:
    return _product_editor(product_id)


@admin.route("/products/<int:product_id>/delete", methods=["POST"])
def product_delete(product_id: int) -> Response:
    return _delete(
        get_api_client().delete_product, product_id, "product",
        "Ошибка при удалении товара", "admin.products",
    )


# =============================================================================
# Categories
# =============================================================================


@admin.route("/categories", methods=["GET"])
def categories() -> str:
    items = fetch_or_empty(get_api_client().list_categories, "categories")
    return render_template("admin/categories.html", categories=items)


def _category_editor(category_id: Optional[int]) -> Union[str, Response]:
    client = get_api_client()
    errors = FormErrors()

    if request.method == "POST":
        form = CategoryForm.from_form(request.form)
        errors = form.validate()
        if errors:
            _rejected("Category", errors)
        else:
            form.image = _single_image(form.image)
            try:
                if category_id is None:
                    client.create_category(form.to_payload())
                else:
                    client.update_category(category_id, form.to_payload())
            except ApiError as e:
                logger.error(f"Error saving category {category_id}: {e}")
                flash(
                    "Ошибка при создании категории" if category_id is None
                    else "Ошибка при обновлении категории",
                    "error",
                )
            else:
                flash("Категория сохранена", "success")
                return redirect(url_for("admin.categories"))
    elif category_id is not None:
        # The API has no single-category endpoint; pick it from the list
        items = fetch_or_empty(client.list_categories, "categories")
        match = next((c for c in items if c.id == category_id), None)
        if match is None:
            abort(404)
        form = CategoryForm.from_category(match)
    else:
        form = CategoryForm()

    return render_template(
        "admin/category_form.html", form=form, errors=errors, category_id=category_id
    )


@admin.route("/categories/new", methods=["GET", "POST"])
def category_new() -> Union[str, Response]:
    return _category_editor(None)


@admin.route("/categories/<int:category_id>/edit", methods=["GET", "POST"])
def category_edit(category_id: int) -> Union[str, Response]:
    return _category_editor(category_id)


@admin.route("/categories/<int:category_id>/delete", methods=["POST"])
def category_delete(category_id: int) -> Response:
    return _delete(
        get_api_client().delete_category, category_id, "category",
        "Ошибка при удалении категории", "admin.categories",
    )


# =============================================================================
# Collections
# =============================================================================


@admin.route("/collections", methods=["GET"])
def collections() -> str:
    items = fetch_or_empty(get_api_client().list_collections, "collections")
    return render_template("admin/collections.html", collections=items)


@admin.route("/collections/new", methods=["GET", "POST"])
def collection_new() -> Union[str, Response]:
    """Create a collection, then add each selected product to it."""
    client = get_api_client()
    all_products = fetch_or_empty(client.list_products, "products")
    form = CollectionForm()
    errors = FormErrors()

    if request.method == "POST":
        form = CollectionForm.from_form(request.form)
        errors = form.validate()
        if errors:
            _rejected("Collection", errors)
        else:
            form.image = _single_image(form.image)
            try:
                created = client.create_collection(form.to_payload())
            except ApiError as e:
                logger.error(f"Error creating collection: {e}")
                flash("Ошибка при создании коллекции", "error")
            else:
                products_saved = True
                if form.product_ids:
                    try:
                        result = sync_collection_products(client, created.id, form.product_ids)
                    except ApiError as e:
                        logger.error(f"Error adding products to collection {created.id}: {e}")
                        flash("Коллекция создана, но товары не добавлены", "error")
                        products_saved = False
                    else:
                        if not result.ok:
                            flash("Коллекция создана, но не все товары удалось добавить", "error")
                            products_saved = False
                if products_saved:
                    flash("Коллекция создана", "success")
                return redirect(url_for("admin.collections"))

    return render_template(
        "admin/collection_form.html",
        form=form,
        errors=errors,
        collection_id=None,
        all_products=all_products,
    )


@admin.route("/collections/<int:collection_id>/edit", methods=["GET", "POST"])
def collection_edit(collection_id: int) -> Union[str, Response]:
    """Edit name, description and image. Membership is saved separately."""
    client = get_api_client()
    errors = FormErrors()
    try:
        collection = client.get_collection(collection_id)
    except ApiNotFound:
        abort(404)
    except ApiError as e:
        logger.error(f"Error fetching collection {collection_id}: {e}")
        flash("Ошибка при загрузке коллекции", "error")
        return redirect(url_for("admin.collections"))

    form = CollectionForm.from_collection(collection)
    if request.method == "POST":
        form = CollectionForm.from_form(request.form)
        form.product_ids = collection.product_ids
        errors = form.validate()
        if errors:
            _rejected("Collection", errors)
        else:
            form.image = _single_image(form.image)
            try:
                client.update_collection(collection_id, form.to_payload())
            except ApiError as e:
                logger.error(f"Error updating collection {collection_id}: {e}")
                flash("Ошибка при обновлении коллекции", "error")
            else:
                flash("Коллекция сохранена", "success")
                return redirect(url_for("admin.collections"))

    return render_template(
        "admin/collection_form.html",
        form=form,
        errors=errors,
        collection_id=collection_id,
        all_products=fetch_or_empty(client.list_products, "products"),
    )


@admin.route("/collections/<int:collection_id>/products", methods=["POST"])
def collection_products(collection_id: int) -> Response:
    """Save the checked products as the collection's membership."""
    form = CollectionForm.from_form(request.form)
    try:
        result = sync_collection_products(get_api_client(), collection_id, form.product_ids)
    except ApiError as e:
        logger.error(f"Error saving products of collection {collection_id}: {e}")
        flash("Ошибка при сохранении товаров", "error")
    else:
        if result.ok:
            flash("Товары успешно обновлены", "success")
        else:
            flash("Ошибка при сохранении товаров", "error")
    return redirect(url_for("admin.collection_edit", collection_id=collection_id))


@admin.route("/collections/<int:collection_id>/delete", methods=["POST"])
def collection_delete(collection_id: int) -> Response:
    return _delete(
        get_api_client().delete_collection, collection_id, "collection",
        "Ошибка при удалении коллекции", "admin.collections",
    )


# =============================================================================
# Contacts
# =============================================================================


@admin.route("/contacts", methods=["GET"])
def contacts() -> str:
    items = fetch_or_empty(get_api_client().list_contacts, "contacts")
    return render_template("admin/contacts.html", contacts=items)


@admin.route("/contacts/<int:contact_id>/delete", methods=["POST"])
def contact_delete(contact_id: int) -> Response:
    return _delete(
        get_api_client().delete_contact, contact_id, "contact",
        "Ошибка при удалении контакта", "admin.contacts",
    )


# =============================================================================
# FAQ
# =============================================================================


@admin.route("/faqs", methods=["GET"])
def faqs() -> str:
    items = fetch_or_empty(get_api_client().list_faqs, "FAQs")
    return render_template("admin/faqs.html", faqs=sort_faqs(items))


def _faq_editor(faq_id: Optional[int]) -> Union[str, Response]:
    client = get_api_client()
    errors = FormErrors()

    if request.method == "POST":
        form = FAQForm.from_form(request.form)
        errors = form.validate()
        if errors:
            _rejected("FAQ", errors)
        else:
            try:
                if faq_id is None:
                    client.create_faq(form.to_payload())
                else:
                    client.update_faq(faq_id, form.to_payload())
            except ApiError as e:
                logger.error(f"Error saving FAQ {faq_id}: {e}")
                action = "создании" if faq_id is None else "обновлении"
                flash(f"Ошибка при {action} вопроса: {e.message}", "error")
            else:
                flash("Вопрос сохранен", "success")
                return redirect(url_for("admin.faqs"))
    elif faq_id is not None:
        try:
            form = FAQForm.from_faq(client.get_faq(faq_id))
        except ApiNotFound:
            abort(404)
        except ApiError as e:
            logger.error(f"Error fetching FAQ {faq_id}: {e}")
            flash("Ошибка при загрузке вопроса", "error")
            return redirect(url_for("admin.faqs"))
    else:
        form = FAQForm()

    return render_template("admin/faq_form.html", form=form, errors=errors, faq_id=faq_id)


@admin.route("/faqs/new", methods=["GET", "POST"])
def faq_new() -> Union[str, Response]:
    return _faq_editor(None)


@admin.route("/faqs/<int:faq_id>/edit", methods=["GET", "POST"])
def faq_edit(faq_id: int) -> Union[str, Response]:
    return _faq_editor(faq_id)


@admin.route("/faqs/<int:faq_id>/delete", methods=["POST"])
def faq_delete(faq_id: int) -> Response:
    return _delete(
        get_api_client().delete_faq, faq_id, "FAQ",
        "Ошибка при удалении вопроса", "admin.faqs",
    )


# =============================================================================
# Placeholders
# =============================================================================


@admin.route("/placeholders", methods=["GET"])
def placeholders() -> str:
    error = None
    try:
        items = get_api_client().list_placeholders()
    except ApiError as e:
        logger.error(f"Error fetching placeholders: {e}")
        items = []
        if e.status_code:
            error = f"Ошибка загрузки: {e.status_code}"
        else:
            error = "Не удалось загрузить заглушки. Проверьте, что backend запущен."
    return render_template("admin/placeholders.html", placeholders=items, error=error)


def _placeholder_editor(placeholder_id: Optional[int]) -> Union[str, Response]:
    client = get_api_client()
    errors = FormErrors()

    if request.method == "POST":
        form = PlaceholderForm.from_form(request.form)
        errors = form.validate()
        if errors:
            _rejected("Placeholder", errors)
        else:
            try:
                if placeholder_id is None:
                    client.create_placeholder(form.to_payload())
                else:
                    client.update_placeholder(placeholder_id, form.to_payload())
            except ApiError as e:
                logger.error(f"Error saving placeholder {placeholder_id}: {e}")
                action = "создании" if placeholder_id is None else "обновлении"
                flash(f"Ошибка при {action} заглушки: {e.message}", "error")
            else:
                flash("Заглушка сохранена", "success")
                return redirect(url_for("admin.placeholders"))
    elif placeholder_id is not None:
        try:
            form = PlaceholderForm.from_placeholder(client.get_placeholder(placeholder_id))
        except ApiNotFound:
            abort(404)
        except ApiError as e:
            logger.error(f"Error fetching placeholder {placeholder_id}: {e}")
            flash("Ошибка при загрузке заглушки", "error")
            return redirect(url_for("admin.placeholders"))
    else:
        form = PlaceholderForm()

    return render_template(
        "admin/placeholder_form.html", form=form, errors=errors, placeholder_id=placeholder_id
    )


@admin.route("/placeholders/new", methods=["GET", "POST"])
def placeholder_new() -> Union[str, Response]:
    return _placeholder_editor(None)


@admin.route("/placeholders/<int:placeholder_id>/edit", methods=["GET", "POST"])
def placeholder_edit(placeholder_id: int) -> Union[str, Response]:
    return _placeholder_editor(placeholder_id)


@admin.route("/placeholders/<int:placeholder_id>/delete", methods=["POST"])
def placeholder_delete(placeholder_id: int) -> Response:
    return _delete(
        get_api_client().delete_placeholder, placeholder_id, "placeholder",
        "Ошибка при удалении заглушки", "admin.placeholders",
    )


# =============================================================================
# Database
# =============================================================================


@admin.route("/database", methods=["GET"])
def database() -> str:
    return render_template("admin/database.html", restore_warning=RESTORE_WARNING)


@admin.route("/database/dump", methods=["POST"])
def database_dump() -> Response:
    """Ask the API to write a database dump (and forward it to Telegram)."""
    try:
        data = get_api_client().create_dump()
    except ApiError as e:
        log_api_event(
            "db_dump_failed",
            {"message": f"Database dump failed: {e}", "status_code": e.status_code},
            level=logging.ERROR,
            logger_name=__name__,
        )
        flash(e.message or "Ошибка при создании дампа", "error")
    else:
        filename = data.get("filename", "")
        log_api_event(
            "db_dump",
            {"message": "Database dump created", "filename": filename,
             "telegram_sent": bool(data.get("telegram_sent"))},
            logger_name=__name__,
        )
        message = f"Дамп успешно создан: {filename}."
        if data.get("telegram_sent"):
            message += " Отправлен в Telegram."
        flash(message, "success")
    return redirect(url_for("admin.database"))


@admin.route("/database/restore", methods=["POST"])
def database_restore() -> Response:
    """Replace the API's database with an uploaded dump.

    Requires the confirmation checkbox, since the current data is lost.
    """
    dump_file = request.files.get("dump")
    problem = validate_dump_upload(dump_file)
    if problem:
        flash(problem, "error")
        return redirect(url_for("admin.database"))
    if request.form.get("confirm") != "on":
        flash("Подтвердите восстановление базы данных", "error")
        return redirect(url_for("admin.database"))

    try:
        get_api_client().restore_dump(dump_file.filename, dump_file.stream)
    except ApiError as e:
        log_api_event(
            "db_restore_failed",
            {"message": f"Database restore failed: {e}", "filename": dump_file.filename,
             "status_code": e.status_code},
            level=logging.ERROR,
            logger_name=__name__,
        )
        flash(e.message or "Ошибка при восстановлении дампа", "error")
    else:
        log_api_event(
            "db_restore",
            {"message": "Database restored from dump", "filename": dump_file.filename},
            logger_name=__name__,
        )
        flash("База данных успешно восстановлена из дампа", "success")
    return redirect(url_for("admin.database"))
