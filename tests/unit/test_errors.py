"""Tests for rn_common.errors and rn_common.response."""

from types import SimpleNamespace

from src.rn_common.errors import (
    AppError,
    BookingStateError,
    ExpiredError,
    ForbiddenError,
    InvalidInputError,
    InvalidOfferError,
    NegotiationExpiredError,
    NegotiationNotFoundError,
    NoCounterOfferError,
    NotFoundError,
    StateError,
    UnknownListingError,
    WrongNegotiationRoleError,
)
from src.rn_common.response import error_response, request_success, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9001, message="Internal error")
        assert err.code == 9001
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert err.kind == "internal"

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestErrorFamilies:
    def test_invalid_offer_is_validation(self) -> None:
        err = InvalidOfferError("proposed_price must be greater than 0, got 0")
        assert isinstance(err, InvalidInputError)
        assert err.code == 3001
        assert err.http_status == 422
        assert err.kind == "validation"

    def test_unknown_listing_is_validation(self) -> None:
        err = UnknownListingError("lst_missing")
        assert err.kind == "validation"
        assert "lst_missing" in err.message

    def test_not_found(self) -> None:
        err = NegotiationNotFoundError("neg_1")
        assert isinstance(err, NotFoundError)
        assert err.http_status == 404
        assert err.kind == "not_found"

    def test_wrong_role_is_permission(self) -> None:
        err = WrongNegotiationRoleError("counter", "owner")
        assert isinstance(err, ForbiddenError)
        assert err.http_status == 403
        assert err.message == "Only the owner can counter this negotiation"

    def test_no_counter_offer_message(self) -> None:
        err = NoCounterOfferError("proposed")
        assert isinstance(err, StateError)
        assert err.http_status == 409
        assert err.message == "No counter offer to accept. Status: proposed"

    def test_expired(self) -> None:
        err = NegotiationExpiredError("neg_1")
        assert isinstance(err, ExpiredError)
        assert err.http_status == 410
        assert err.kind == "expired"

    def test_booking_state(self) -> None:
        err = BookingStateError("bkg_1", "already paid")
        assert err.code == 4005
        assert err.kind == "state"


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": "abc"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "abc"}
        assert resp.error_kind is None

    def test_error_carries_kind(self) -> None:
        resp = error_response(3008, "Negotiation neg_1 has expired", "expired")
        assert resp.code == 3008
        assert resp.data is None
        assert resp.error_kind == "expired"

    def test_request_success_uses_request_id(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace(request_id="req_fixed"))
        resp = request_success(request, {"ok": True}, "Booking created")
        assert resp.request_id == "req_fixed"
        assert resp.message == "Booking created"

    def test_request_success_without_middleware(self) -> None:
        request = SimpleNamespace(state=SimpleNamespace())
        resp = request_success(request)
        assert resp.request_id.startswith("req_")

    def test_serialization(self) -> None:
        d = success_response({"monthly_rent": 18000}).model_dump()
        for key in ("code", "message", "data", "error_kind", "timestamp", "request_id"):
            assert key in d
