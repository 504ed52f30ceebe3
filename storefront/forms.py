"""Form parsing and validation for the public and admin pages.

Each form is a dataclass holding the raw field values so an invalid submission
can be re-rendered exactly as the user typed it. ``validate()`` runs before
any API call; a form with errors is never sent.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from werkzeug.datastructures import FileStorage

from .config import MAX_UPLOAD_BYTES
from .models import FAQ, Category, Collection, Placeholder, Product

__all__ = [
    "FormErrors",
    "ContactForm",
    "ProductForm",
    "CategoryForm",
    "CollectionForm",
    "FAQForm",
    "PlaceholderForm",
    "DEFAULT_PLACEHOLDER_TITLE",
    "DEFAULT_PLACEHOLDER_MESSAGE",
    "parse_features",
    "parse_id_list",
    "validate_image_upload",
    "validate_dump_upload",
]

logger = logging.getLogger(__name__)

REQUIRED = "Обязательное поле"

DEFAULT_PLACEHOLDER_TITLE = "Упс, данная страница в разработке"
DEFAULT_PLACEHOLDER_MESSAGE = "Мы работаем над этой страницей. Скоро она будет доступна!"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


class FormErrors(dict):
    """Field name -> message. Falsy when the form is valid."""

    def add(self, field_name: str, message: str) -> None:
        self.setdefault(field_name, message)

    def require(self, values: Mapping[str, str], *field_names: str) -> None:
        for name in field_names:
            if not (values.get(name) or "").strip():
                self.add(name, REQUIRED)


def _text(form: Mapping[str, Any], name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def _checked(form: Mapping[str, Any], name: str) -> bool:
    return form.get(name) in ("on", "true", "1", "yes")


def _number_text(value: float) -> str:
    """Render a number for an input field without a trailing .0 or exponent."""
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def parse_features(raw: str) -> List[str]:
    """Split a comma-separated feature list, dropping blanks."""
    return [f.strip() for f in (raw or "").split(",") if f.strip()]


def parse_id_list(values: List[str]) -> List[int]:
    """Parse checkbox values into product ids, skipping anything non-numeric."""
    ids: List[int] = []
    for value in values:
        try:
            ids.append(int(value))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric id in form: {value!r}")
    return list(dict.fromkeys(ids))


def _file_size(file: FileStorage) -> int:
    if file.content_length:
        return file.content_length
    stream = file.stream
    pos = stream.tell()
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(pos)
    return size


def validate_image_upload(file: Optional[FileStorage]) -> Optional[str]:
    """Check an uploaded image; returns an error message or None.

    Only called for a file that was actually chosen.
    """
    if file is None or not file.filename:
        return "Файл не выбран"
    if not (file.mimetype or "").startswith("image/"):
        return f"Файл {file.filename} не является изображением"
    if _file_size(file) > MAX_UPLOAD_BYTES:
        return f"Размер файла {file.filename} превышает 5MB"
    return None


def validate_dump_upload(file: Optional[FileStorage]) -> Optional[str]:
    if file is None or not file.filename:
        return "Пожалуйста, выберите файл дампа"
    return None


@dataclass
class ContactForm:
    name: str = ""
    email: str = ""
    phone: str = ""
    message: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ContactForm":
        return cls(
            name=_text(form, "name"),
            email=_text(form, "email"),
            phone=_text(form, "phone"),
            message=_text(form, "message"),
        )

    def validate(self) -> FormErrors:
        errors = FormErrors()
        errors.require(vars(self), "name", "email", "message")
        if self.email and not _EMAIL_RE.match(self.email):
            errors.add("email", "Некорректный email")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return dict(vars(self))


@dataclass
class ProductForm:
    """Product editor state.

    Numbers stay as strings until ``to_payload`` so a bad value is echoed
    back unchanged. ``images`` holds API paths; the first is the main image.
    """

    name: str = ""
    category: str = ""
    price: str = ""
    rating: str = ""
    reviews: str = ""
    description: str = ""
    color: str = ""
    dimensions: str = ""
    material: str = ""
    features: str = ""
    featured: bool = False
    images: List[str] = field(default_factory=list)

    @classmethod
    def from_form(cls, form: Any) -> "ProductForm":
        removed = set(form.getlist("remove_images"))
        images = [img for img in form.getlist("images") if img and img not in removed]
        return cls(
            name=_text(form, "name"),
            category=_text(form, "category"),
            price=_text(form, "price"),
            rating=_text(form, "rating"),
            reviews=_text(form, "reviews"),
            description=_text(form, "description"),
            color=_text(form, "color"),
            dimensions=_text(form, "dimensions"),
            material=_text(form, "material"),
            features=_text(form, "features"),
            featured=_checked(form, "featured"),
            images=images,
        )

    @classmethod
    def from_product(cls, product: Product) -> "ProductForm":
        return cls(
            name=product.name,
            category=product.category,
            price=_number_text(product.price),
            rating=_number_text(product.rating),
            reviews=str(product.reviews),
            description=product.description,
            color=product.color,
            dimensions=product.dimensions,
            material=product.material,
            features=", ".join(product.features),
            featured=product.featured,
            images=product.gallery,
        )

    def validate(self) -> FormErrors:
        errors = FormErrors()
        errors.require(vars(self), "name", "category", "price", "description")
        for name in ("price", "rating"):
            value = getattr(self, name)
            if not value:
                continue
            try:
                number = float(value)
            except ValueError:
                errors.add(name, "Введите число")
                continue
            if not math.isfinite(number):
                errors.add(name, "Введите число")
            elif number < 0:
                errors.add(name, "Значение не может быть отрицательным")
        if self.rating and "rating" not in errors and float(self.rating) > 5:
            errors.add("rating", "Рейтинг от 0 до 5")
        if self.reviews:
            try:
                if int(self.reviews) < 0:
                    errors.add("reviews", "Значение не может быть отрицательным")
            except ValueError:
                errors.add("reviews", "Введите целое число")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "price": float(self.price),
            "rating": float(self.rating) if self.rating else 0.0,
            "reviews": int(self.reviews) if self.reviews else 0,
            "description": self.description,
            "image": self.images[0] if self.images else "",
            "images": list(self.images),
            "color": self.color,
            "dimensions": self.dimensions,
            "material": self.material,
            "features": parse_features(self.features),
            "featured": self.featured,
        }


@dataclass
class CategoryForm:
    name: str = ""
    description: str = ""
    icon: str = ""
    href: str = ""
    image: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "CategoryForm":
        return cls(
            name=_text(form, "name"),
            description=_text(form, "description"),
            icon=_text(form, "icon"),
            href=_text(form, "href"),
            image=_text(form, "image"),
        )

    @classmethod
    def from_category(cls, category: Category) -> "CategoryForm":
        return cls(**category.to_payload())

    def validate(self) -> FormErrors:
        errors = FormErrors()
        errors.require(vars(self), "name", "description")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return dict(vars(self))


@dataclass
class CollectionForm:
    name: str = ""
    description: str = ""
    image: str = ""
    product_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_form(cls, form: Any) -> "CollectionForm":
        return cls(
            name=_text(form, "name"),
            description=_text(form, "description"),
            image=_text(form, "image"),
            product_ids=parse_id_list(form.getlist("product_ids")),
        )

    @classmethod
    def from_collection(cls, collection: Collection) -> "CollectionForm":
        return cls(product_ids=collection.product_ids, **collection.to_payload())

    def validate(self) -> FormErrors:
        errors = FormErrors()
        errors.require({"name": self.name, "description": self.description}, "name", "description")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "image": self.image}


@dataclass
class FAQForm:
    question: str = ""
    answer: str = ""
    order: str = "0"

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "FAQForm":
        return cls(
            question=_text(form, "question"),
            answer=_text(form, "answer"),
            order=_text(form, "order") or "0",
        )

    @classmethod
    def from_faq(cls, faq: FAQ) -> "FAQForm":
        return cls(question=faq.question, answer=faq.answer, order=str(faq.order))

    def validate(self) -> FormErrors:
        errors = FormErrors()
        errors.require(vars(self), "question", "answer")
        try:
            int(self.order)
        except ValueError:
            errors.add("order", "Введите целое число")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return {"question": self.question, "answer": self.answer, "order": int(self.order)}


@dataclass
class PlaceholderForm:
    path: str = ""
    title: str = DEFAULT_PLACEHOLDER_TITLE
    message: str = DEFAULT_PLACEHOLDER_MESSAGE
    is_active: bool = True

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "PlaceholderForm":
        return cls(
            path=_text(form, "path"),
            title=_text(form, "title"),
            message=_text(form, "message"),
            is_active=_checked(form, "is_active"),
        )

    @classmethod
    def from_placeholder(cls, placeholder: Placeholder) -> "PlaceholderForm":
        return cls(**placeholder.to_payload())

    def validate(self) -> FormErrors:
        errors = FormErrors()
        errors.require({"path": self.path, "title": self.title}, "path", "title")
        if self.path and not self.path.startswith("/"):
            errors.add("path", "Путь должен начинаться с /")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return dict(vars(self))
