from __future__ import annotations

from typing import Any

from flask import Blueprint, abort, current_app, request

from app.customerdb.db import db_session
from app.customerdb.modules.customers.models import Customer
from app.customerdb.modules.customers.repository import CustomerRepository

bp = Blueprint("customers", __name__)

MAX_PER_PAGE = 200


def _repo() -> CustomerRepository:
    return CustomerRepository(db_session())


def customer_to_dict(c: Customer) -> dict[str, Any]:
    return {"id": c.id, "name": c.name, "address": c.address}


def validate_customer_payload(payload: Any) -> list[str]:
    """Validate create/update payload. Returns list of errors."""
    if not isinstance(payload, dict):
        return ["Request body must be a JSON object."]
    errors = []
    for field in ("name", "address"):
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            errors.append(f"{field} is required.")
    return errors


def _json_payload() -> Any:
    return request.get_json(silent=True)


def _int_arg(name: str, default: int) -> int | None:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return None


# ---------- List / search ----------
@bp.get("")
def customers_list():
    repo = _repo()
    if "q" in request.args:
        found = repo.find_by_name_containing_ignore_case(request.args["q"])
        return {"items": [customer_to_dict(c) for c in found]}

    if "page" not in request.args:
        return {"items": [customer_to_dict(c) for c in repo.find_all()]}

    page = _int_arg("page", 1)
    per_page = _int_arg("per_page", 50)
    if page is None or per_page is None or per_page < 1:
        return {"errors": ["page and per_page must be positive integers."]}, 400
    per_page = min(per_page, MAX_PER_PAGE)
    result = repo.find_page(page=page, per_page=per_page)
    return {
        "items": [customer_to_dict(c) for c in result.items],
        "total": result.total,
        "page": result.page,
        "per_page": result.per_page,
        "pages": result.pages,
    }


# ---------- Detail ----------
@bp.get("/<int:customer_id>")
def customers_detail(customer_id: int):
    c = _repo().find_by_id(customer_id)
    if c is None:
        abort(404)
    return customer_to_dict(c)


# ---------- Create ----------
@bp.post("")
def customers_create():
    payload = _json_payload()
    errors = validate_customer_payload(payload)
    if errors:
        return {"errors": errors}, 400
    # Ids are store-generated; anything the client sends is ignored.
    c = _repo().save(Customer(name=payload["name"], address=payload["address"]))
    current_app.logger.info("Customer created id=%s", c.id)
    return customer_to_dict(c), 201


# ---------- Update ----------
@bp.put("/<int:customer_id>")
def customers_update(customer_id: int):
    payload = _json_payload()
    errors = validate_customer_payload(payload)
    if errors:
        return {"errors": errors}, 400
    repo = _repo()
    c = repo.find_by_id(customer_id)
    if c is None:
        abort(404)
    c.name = payload["name"]
    c.address = payload["address"]
    c = repo.save(c)
    current_app.logger.info("Customer updated id=%s", c.id)
    return customer_to_dict(c)


# ---------- Delete ----------
@bp.delete("/<int:customer_id>")
def customers_delete(customer_id: int):
    _repo().delete_by_id(customer_id)
    current_app.logger.info("Customer delete requested id=%s", customer_id)
    return "", 204
