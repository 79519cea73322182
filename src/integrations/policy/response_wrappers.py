from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from src.integrations.contracts.interfaces import ConfirmResult, GatewayError, GatewayIntent


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class PaymentIntentResponseModel(BaseModel):
    success: bool = False
    client_secret: Optional[str] = None
    free_order: bool = False
    small_order: bool = False
    order_id: Optional[str] = None
    status: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    raw: Dict[str, Any] = Field(default_factory=dict)


class GatewayIntentModel(BaseModel):
    id: str
    status: str
    amount: int = Field(ge=0)


class GatewayErrorModel(BaseModel):
    message: Optional[str] = None
    code: Optional[str] = None
    type: Optional[str] = None


def normalize_payment_intent_response(raw: Any) -> PaymentIntentResponseModel:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise IntegrationResponseError(f"Payment intent response must be an object; got {type(raw).__name__}.")

    errors = raw.get("errors")
    if isinstance(errors, str):
        errors = [errors]
    elif not isinstance(errors, list):
        errors = []

    return _build_model(
        PaymentIntentResponseModel,
        {
            "success": _flag(raw, "success"),
            "client_secret": _non_empty_str(raw.get("client_secret") or raw.get("clientSecret")),
            "free_order": _flag(raw, "free_order"),
            "small_order": _flag(raw, "small_order"),
            "order_id": _non_empty_str(raw.get("order_id")),
            "status": _non_empty_str(raw.get("status")),
            "errors": [str(e) for e in errors],
            "raw": raw,
        },
        raw,
    )


def normalize_confirm_response(raw: Dict[str, Any]) -> ConfirmResult:
    """Map a gateway confirmation payload to a ConfirmResult.

    The gateway answers either with an error object (``{"error": {...}}``) or
    with the payment intent itself; some wrappers nest the intent under
    ``payment_intent`` / ``paymentIntent``.
    """
    if not isinstance(raw, dict):
        raise IntegrationResponseError("Confirmation response must be an object.")

    error = raw.get("error")
    if error:
        if isinstance(error, str):
            error = {"message": error}
        model = _build_model(GatewayErrorModel, _pick(error, "message", "code", "type"), raw)
        return ConfirmResult(error=GatewayError(message=model.message, code=model.code, type=model.type))

    intent = raw.get("payment_intent") or raw.get("paymentIntent")
    if intent is None and raw.get("object") == "payment_intent":
        intent = raw
    if not intent:
        return ConfirmResult()

    model = _build_model(GatewayIntentModel, _pick(intent, "id", "status", "amount"), raw)
    return ConfirmResult(payment_intent=GatewayIntent(id=model.id, status=model.status, amount=model.amount))


def _flag(data: Dict[str, Any], key: str) -> Any:
    # passed through unconverted so the model reads "false" and "0" as False
    value = data.get(key)
    return False if value is None else value


def _pick(data: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    return {key: data.get(key) for key in keys if data.get(key) is not None}


def _non_empty_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
