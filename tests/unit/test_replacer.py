"""
Tests for placeholder substitution.
"""
import pytest
from starlette.requests import Request

from jwt_signer.replacer import Replacer


def make_request(path="/login", query=b"", headers=None, method="GET"):
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    scope = {
        "type": "http",
        "method": method,
        "scheme": "https",
        "server": ("proxy.example", 443),
        "client": ("10.0.0.7", 51234),
        "path": path,
        "root_path": "",
        "query_string": query,
        "headers": [(b"host", b"proxy.example")] + raw_headers,
    }
    return Request(scope)


class TestReplacer:
    def test_expand_known_and_unknown(self, replacer):
        assert replacer.expand("{user}") == "alice"
        assert replacer.expand("user={user};missing={nope}") == "user=alice;missing="
        assert replacer.expand("{nope}") == ""

    def test_text_without_placeholders(self, replacer):
        assert replacer.expand("plain text") == "plain text"

    def test_escaped_braces(self, replacer):
        assert replacer.expand(r"\{user\}") == "{user}"

    def test_custom_empty_value(self, replacer):
        assert replacer.expand("{nope}", empty="-") == "-"

    def test_publish_then_read(self):
        repl = Replacer()
        repl.publish("http.jwt_signer.digest_str", "abc")

        assert repl.get("http.jwt_signer.digest_str") == "abc"
        assert repl.expand("Bearer {http.jwt_signer.digest_str}") == "Bearer abc"

    def test_env_placeholder(self, monkeypatch):
        monkeypatch.setenv("JWT_SIGNER_TEST_VALUE", "from-env")

        assert Replacer().expand("{env.JWT_SIGNER_TEST_VALUE}") == "from-env"
        assert Replacer().expand("{env.JWT_SIGNER_TEST_UNSET}") == ""

    def test_non_string_values_are_stringified(self):
        assert Replacer({"count": 3}).expand("{count}") == "3"


class TestReplacerForRequest:
    def test_request_values(self):
        request = make_request(
            path="/app/login",
            query=b"name=Alice&city=Paris",
            headers={"X-User": "alice", "Cookie": "session=s1"},
        )
        repl = Replacer.for_request(request)

        assert repl.expand("{http.request.method}") == "GET"
        assert repl.expand("{http.request.host}") == "proxy.example"
        assert repl.expand("{http.request.uri.path}") == "/app/login"
        assert repl.expand("{http.request.uri}") == "/app/login?name=Alice&city=Paris"
        assert repl.expand("{http.request.header.x-user}") == "alice"
        assert repl.expand("{http.request.uri.query.city}") == "Paris"
        assert repl.expand("{http.request.cookie.session}") == "s1"
        assert repl.expand("{http.request.remote.host}") == "10.0.0.7"

    @pytest.mark.parametrize(
        "short,expected",
        [
            ("{header.X-User}", "alice"),
            ("{query.name}", "Alice"),
            ("{path}", "/app/login"),
            ("{method}", "GET"),
            ("{host}", "proxy.example"),
            ("{file}", "login"),
            ("{dir}", "/app/"),
            ("{query}", "name=Alice"),
            ("{scheme}", "https"),
            ("{remote_host}", "10.0.0.7"),
        ],
    )
    def test_shorthands(self, short, expected):
        request = make_request(path="/app/login", query=b"name=Alice", headers={"X-User": "alice"})

        assert Replacer.for_request(request).expand(short) == expected

    def test_missing_header_is_empty(self):
        repl = Replacer.for_request(make_request())

        assert repl.expand("{header.X-Missing}") == ""

    def test_time_now(self):
        repl = Replacer.for_request(make_request())

        assert repl.expand("{time.now.unix}").isdigit()
