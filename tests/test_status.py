"""Tests for the status variants and their code/reason mapping."""

import pytest

from static_server.status import (
    BadRequest,
    Forbidden,
    NotFound,
    NotImplementedStatus,
    Redirect,
    ServerError,
    Success,
    from_status,
)


class TestFromStatus:
    """Every variant maps to exactly one code and reason phrase."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (Success(), (200, "OK")),
            (Redirect("http://example.com/"), (301, "Moved Permanently")),
            (BadRequest(), (400, "Bad Request")),
            (Forbidden(), (403, "Forbidden")),
            (NotFound(), (404, "Not Found")),
            (ServerError(), (500, "Internal Server Error")),
            (NotImplementedStatus(), (501, "Not Implemented")),
        ],
    )
    def test_mapping(self, status, expected) -> None:
        """from_status returns the code and reason of the variant."""
        assert from_status(status) == expected

    def test_mapping_is_stable(self) -> None:
        """Repeated lookups return the same pair."""
        assert from_status(NotFound()) == from_status(NotFound())


class TestStatusVariants:
    """Equality and error classification."""

    def test_same_variant_is_equal(self) -> None:
        """Payload-free variants compare equal by kind."""
        assert Forbidden() == Forbidden()
        assert Forbidden() != NotFound()

    def test_redirect_compares_target(self) -> None:
        """Redirects are equal only when their targets match."""
        assert Redirect("/a") == Redirect("/a")
        assert Redirect("/a") != Redirect("/b")

    def test_redirect_keeps_target(self) -> None:
        """Only Redirect carries a target."""
        assert Redirect("http://x/index.html").target == "http://x/index.html"
        assert not hasattr(Success(), "target")

    def test_is_error(self) -> None:
        """4xx and 5xx variants are errors, 200 and 301 are not."""
        assert not Success().is_error
        assert not Redirect("/").is_error
        assert all(s.is_error for s in (BadRequest(), Forbidden(), NotFound(), ServerError(), NotImplementedStatus()))

    def test_usable_as_dict_key(self) -> None:
        """Statuses hash consistently with equality."""
        counts = {Success(): 1}
        assert counts[Success()] == 1


def test_repr_names_the_variant() -> None:
    """The repr shows the variant class and, for redirects, the target."""
    assert repr(NotImplementedStatus()) == "NotImplementedStatus()"
    assert repr(Redirect("/a")) == "Redirect('/a')"
