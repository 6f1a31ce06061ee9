from decimal import Decimal

from src.error_handler import ErrorHandler
from src.services.errors import CapExceededError, InsufficientFundsError, NotFoundError, TransactionFailure


def test_handle_exception_returns_generic_message():
    eh = ErrorHandler()
    out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert "internal error" in out["message"].lower()
    assert "boom" not in out["message"]


def test_render_uses_status_and_default_message():
    status, body = ErrorHandler().render(NotFoundError())
    assert status == 404
    assert body == {"message": "No Records Found!"}


def test_render_merges_payload_as_json_numbers():
    status, body = ErrorHandler().render(CapExceededError(payload={"max_deposit": Decimal("100.50")}))
    assert status == 400
    assert body == {"max_deposit": 100.5, "message": "Maximum Deposit Amount Exceeded."}


def test_render_custom_message():
    status, body = ErrorHandler().render(TransactionFailure("Error! while paying for the job"))
    assert status == 409
    assert body["message"] == "Error! while paying for the job"
    assert InsufficientFundsError.status_code == 402


def test_render_validation_names_fields():
    errors = [{"type": "greater_than", "loc": ("body", "amount"), "msg": "Input should be greater than 0", "ctx": {"gt": Decimal("0")}}]
    status, body = ErrorHandler().render_validation(errors)
    assert status == 422
    assert body["message"] == "Invalid request: body.amount: Input should be greater than 0"
    assert body["details"][0]["ctx"] == {"gt": 0.0}
