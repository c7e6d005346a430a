"""
Tests for handler invocation and outcome normalization.
"""

from apibuilder import ApiResponse, Failure, HTTPMethod, Request, Success
from apibuilder.invocation import accepts_request, invoke_handler, settle


def make_request():
    return Request(method=HTTPMethod.GET, path="/test")


class TestInvokeHandler:
    """Test normalization of handler results into outcomes."""

    def test_returned_value_is_success(self):
        outcome, dynamic = invoke_handler(lambda request: {"ok": True}, make_request())
        assert outcome == Success({"ok": True})
        assert dynamic is None

    def test_raised_exception_is_failure(self):
        error = ValueError("bad")

        def handler(request):
            raise error

        outcome, dynamic = invoke_handler(handler, make_request())
        assert isinstance(outcome, Failure)
        assert outcome.error is error
        assert dynamic is None

    def test_returned_api_response(self):
        response = ApiResponse("ok", {"X-A": "1"}, 201)
        outcome, dynamic = invoke_handler(lambda request: response, make_request())
        assert isinstance(outcome, Success)
        assert dynamic is response

    def test_raised_api_response(self):
        response = ApiResponse("<error/>", {"Content-Type": "text/xml"}, 500)

        def handler(request):
            raise response

        outcome, dynamic = invoke_handler(handler, make_request())
        assert isinstance(outcome, Failure)
        assert dynamic is response

    def test_async_handler_is_settled(self):
        async def handler(request):
            return {"path": request.path}

        outcome, dynamic = invoke_handler(handler, make_request())
        assert outcome == Success({"path": "/test"})
        assert dynamic is None

    def test_async_handler_failure(self):
        async def handler(request):
            raise LookupError("gone")

        outcome, _ = invoke_handler(handler, make_request())
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, LookupError)

    def test_async_handler_raising_api_response(self):
        async def handler(request):
            raise ApiResponse("teapot", http_code=418)

        outcome, dynamic = invoke_handler(handler, make_request())
        assert isinstance(outcome, Failure)
        assert dynamic.http_code == 418

    def test_handler_without_request(self):
        outcome, _ = invoke_handler(lambda: "no args", make_request(), pass_request=False)
        assert outcome == Success("no args")


class TestHelpers:
    def test_accepts_request(self):
        def with_request(request):
            pass

        def without():
            pass

        def star(*args):
            pass

        def keyword_only(*, request=None):
            pass

        assert accepts_request(with_request)
        assert accepts_request(star)
        assert not accepts_request(without)
        assert not accepts_request(keyword_only)

    def test_settle(self):
        async def compute():
            return 7

        assert settle(compute()) == 7
