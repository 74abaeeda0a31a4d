"""
Unit tests for the action lifecycle and response helpers.
"""

import json

import pytest

from httpaction import Action, DEFAULT_RESPONSE
from httpaction.action import BodyKind, classify_body


class TestRespond:
    """Tests for respond() and how its return value is written."""

    def test_default_respond(self, get):
        """Test that an action without overrides sends the default body."""
        app = type("App", (Action,), {})

        response = get(app)

        assert response.status == 200
        assert response.content_length == len(DEFAULT_RESPONSE)
        assert response["Content-Type"] == "text/html"
        assert response.body == [DEFAULT_RESPONSE.encode()]

    def test_custom_respond(self, get):
        """Test that a returned string becomes the only body chunk."""
        class App(Action):
            def respond(self):
                return "bananas"

        response = get(App)

        assert response.status == 200
        assert response.content_length == 7
        assert response["Content-Length"] == "7"
        assert response["Content-Type"] == "text/html"
        assert response.body == [b"bananas"]

    def test_respond_returning_chunks(self, get):
        """Test that a list of strings is written chunk by chunk."""
        class App(Action):
            def respond(self):
                return ["a", "b", b"c"]

        response = get(App)

        assert response.body == [b"a", b"b", b"c"]
        assert response["Content-Type"] == "text/html"

    def test_respond_returning_data_is_json(self, get):
        """Test that non-text return values are serialized as JSON."""
        class App(Action):
            def respond(self):
                return {"hello": "world"}

        response = get(App)

        assert response.status == 200
        assert response["Content-Type"] == "application/json"
        assert response.text == '{"hello":"world"}'

    def test_respond_returning_none_is_json_null(self, get):
        """Test that None is serialized like any other value."""
        class App(Action):
            def respond(self):
                return None

        response = get(App)

        assert response["Content-Type"] == "application/json"
        assert response.text == "null"

    def test_return_value_ignored_when_respond_writes(self, get):
        """Test that a respond() that writes itself wins over its return."""
        class App(Action):
            def respond(self):
                self.response.write("written")
                return "returned"

        response = get(App)

        assert response.body == [b"written"]

    def test_json_respond(self, get):
        """Test json() sets the content type and writes compact JSON."""
        class App(Action):
            def respond(self):
                return self.json({"hello": "world"})

        expected = '{"hello":"world"}'
        response = get(App)

        assert response.status == 200
        assert response.content_length == len(expected)
        assert response["Content-Type"] == "application/json"
        assert response.body == [expected.encode()]

    def test_json_with_status(self, get):
        """Test json() with a status override."""
        class App(Action):
            def respond(self):
                self.json({"error": "invalid"}, status=422)

        response = get(App)

        assert response.status == 422
        assert json.loads(response.text) == {"error": "invalid"}

    def test_pretty_json_respond(self, get):
        """Test pretty_json() indents the output."""
        class App(Action):
            def respond(self):
                return self.pretty_json({"hello": "world"})

        expected = '{\n  "hello": "world"\n}'
        response = get(App)

        assert response.status == 200
        assert response["Content-Length"] == str(len(expected))
        assert response["Content-Type"] == "application/json"
        assert response.body == [expected.encode()]

    def test_pretty_json_with_compact_serializer(self, get):
        """Test pretty_json() indents output of a serializer without a pretty option."""
        class CompactCodec:
            def dump(self, value):
                return json.dumps(value, separators=(",", ":"))

            def load(self, text):
                return json.loads(text)

        class App(Action):
            def respond(self):
                return self.pretty_json({"a": 1})

        App.configure(json_serializer=CompactCodec())

        assert get(App).text == '{\n  "a": 1\n}'

    def test_respond_error_propagates(self, get):
        """Test that errors from respond() reach the caller unchanged."""
        class App(Action):
            def respond(self):
                raise KeyError("missing")

        with pytest.raises(KeyError):
            get(App)


class TestStatusHelpers:
    """Tests for respond_with(), not_found() and forbidden()."""

    def test_not_found(self, get):
        """Test not_found() sends an empty 404."""
        class App(Action):
            def respond(self):
                return self.not_found()

        response = get(App)

        assert response.status == 404
        assert response.body == [b""]
        assert response["Content-Length"] == "0"

    def test_forbidden(self, get):
        """Test forbidden() sends an empty 403."""
        class App(Action):
            def respond(self):
                self.forbidden()
                return "never written"

        response = get(App)

        assert response.status == 403
        assert response.text == ""

    def test_respond_with_no_content(self, get):
        """Test that 204 responses drop body and Content-Type."""
        class App(Action):
            def respond(self):
                self.respond_with(204)

        response = get(App)

        assert response.status == 204
        assert response.body == []
        assert "Content-Type" not in response.headers
        assert "Content-Length" not in response.headers


class TestRedirect:
    """Tests for redirect_to()."""

    @staticmethod
    def redirecting_app(url="/login", **options):
        class App(Action):
            def respond(self):
                raise AssertionError("respond should not be called if a before filter sets the response")

            def login_required(self):
                self.redirected_to = self.redirect_to(url, **options)

        App.before_filter("login_required")
        return App

    def test_redirect(self, get):
        """Test a relative redirect on the default port."""
        response = get(self.redirecting_app())

        assert response.status == 302
        assert response["Location"] == "http://example.com/login"
        assert response.text == ""

    def test_redirect_non_default_port(self, get):
        """Test that a non-default server port ends up in the URL."""
        response = get(self.redirecting_app(), server_port="3000")

        assert response.status == 302
        assert response["Location"] == "http://example.com:3000/login"

    def test_redirect_non_default_port_option(self, get):
        """Test that an explicit port overrides the request's port."""
        response = get(self.redirecting_app(port=3000))

        assert response.status == 302
        assert response["Location"] == "http://example.com:3000/login"

    def test_secure_redirect(self, get):
        """Test that https on 443 omits the port."""
        response = get(self.redirecting_app(), server_port="443", scheme="https")

        assert response.status == 302
        assert response["Location"] == "https://example.com/login"

    def test_redirect_absolute_url(self, get):
        """Test that absolute URLs are used unchanged."""
        response = get(self.redirecting_app("http://test.com/login"), server_port="3000")

        assert response.status == 302
        assert response["Location"] == "http://test.com/login"

    def test_redirect_returns_url(self, context_factory):
        """Test that redirect_to() returns the absolute URL."""
        action = self.redirecting_app()(context_factory())

        action.login_required()

        assert action.redirected_to == "http://example.com/login"


class TestFormat:
    """Tests for the format property."""

    def test_format_param_wins(self, context_factory):
        """Test that ?format= overrides the Accept header."""
        context = context_factory(query_string="format=xml", headers={"Accept": "application/json"})

        assert Action(context).format == "xml"

    def test_blank_format_param_wins(self, context_factory):
        """Test that a blank ?format= still counts as present."""
        context = context_factory(query_string="format=", headers={"Accept": "application/json"})

        assert Action(context).format == ""

    def test_format_from_accept(self, context_factory):
        """Test that Accept: application/json selects json."""
        context = context_factory(headers={"Accept": "application/json"})

        assert Action(context).format == "json"

    def test_format_defaults_to_html(self, context_factory):
        """Test that any other Accept header selects html."""
        context = context_factory(headers={"Accept": "application/json, text/html"})

        assert Action(context).format == "html"


class TestClassifyBody:
    """Tests for return value classification."""

    def test_text(self):
        assert classify_body("x") is BodyKind.TEXT
        assert classify_body(b"x") is BodyKind.TEXT

    def test_chunks(self):
        assert classify_body(["a", "b"]) is BodyKind.CHUNKS
        assert classify_body(("a", b"b")) is BodyKind.CHUNKS

    def test_data(self):
        assert classify_body({"a": 1}) is BodyKind.DATA
        assert classify_body([1, 2]) is BodyKind.DATA
        assert classify_body(None) is BodyKind.DATA
        assert classify_body(42) is BodyKind.DATA
