"""Tests for building HTTP requests from proxy integration events."""

import base64

import pytest

from lambda_runtime.exceptions.invocation_errors import HandlerError
from lambda_runtime.http.request import RequestOrigin, detect_origin, parse_http_event


def _v1_event(**overrides):
    event = {
        "resource": "/orders/{id}",
        "path": "/orders/17",
        "httpMethod": "GET",
        "headers": {"Host": "api.example.com", "X-Forwarded-Proto": "https", "Accept": "*/*"},
        "multiValueHeaders": {
            "Host": ["api.example.com"],
            "X-Forwarded-Proto": ["https"],
            "Accept": ["*/*"],
        },
        "queryStringParameters": {"tag": "b"},
        "multiValueQueryStringParameters": {"tag": ["a", "b"]},
        "pathParameters": {"id": "17"},
        "stageVariables": None,
        "requestContext": {"requestId": "ctx-1", "stage": "prod"},
        "body": None,
        "isBase64Encoded": False,
    }
    event.update(overrides)
    return event


def _v2_event(**overrides):
    event = {
        "version": "2.0",
        "routeKey": "POST /items",
        "rawPath": "/items",
        "rawQueryString": "limit=10&sort=asc",
        "cookies": ["session=abc", "theme=dark"],
        "headers": {"content-type": "application/json", "x-forwarded-proto": "https"},
        "queryStringParameters": {"limit": "10", "sort": "asc"},
        "requestContext": {
            "domainName": "id.execute-api.us-east-1.amazonaws.com",
            "http": {"method": "POST", "path": "/items"},
        },
        "body": '{"name": "widget"}',
        "isBase64Encoded": False,
    }
    event.update(overrides)
    return event


def _alb_event(**overrides):
    event = {
        "requestContext": {"elb": {"targetGroupArn": "arn:aws:elasticloadbalancing:tg"}},
        "httpMethod": "GET",
        "path": "/health",
        "queryStringParameters": {"q": "a%20b"},
        "headers": {"host": "lb.example.com", "x-forwarded-proto": "http"},
        "body": "",
        "isBase64Encoded": False,
    }
    event.update(overrides)
    return event


class TestDetectOrigin:
    def test_api_gateway_v1(self):
        assert detect_origin(_v1_event()) == RequestOrigin.API_GATEWAY_V1

    def test_api_gateway_v2(self):
        assert detect_origin(_v2_event()) == RequestOrigin.API_GATEWAY_V2

    def test_alb(self):
        assert detect_origin(_alb_event()) == RequestOrigin.ALB

    def test_not_http_event(self):
        with pytest.raises(HandlerError):
            detect_origin({"Records": []})


class TestApiGatewayV1:
    def test_method_path_and_url(self):
        request = parse_http_event(_v1_event())
        assert request.method == "GET"
        assert request.path == "/orders/17"
        assert request.url == "https://api.example.com/orders/17"

    def test_headers_lowercased(self):
        request = parse_http_event(_v1_event())
        assert request.header("ACCEPT") == "*/*"
        assert "accept" in request.headers

    def test_multi_value_query_preferred(self):
        request = parse_http_event(_v1_event())
        assert request.query["tag"] == ["a", "b"]
        assert request.query_value("tag") == "a"

    def test_single_value_query_fallback(self):
        request = parse_http_event(_v1_event(multiValueQueryStringParameters=None))
        assert request.query == {"tag": ["b"]}

    def test_multi_value_headers_preferred(self):
        event = _v1_event(
            headers={"Accept": "text/html"},
            multiValueHeaders={"Accept": ["text/html", "application/json"]},
        )
        assert parse_http_event(event).headers["accept"] == ["text/html", "application/json"]

    def test_path_parameters_and_null_stage_variables(self):
        request = parse_http_event(_v1_event())
        assert request.path_parameters == {"id": "17"}
        assert request.stage_variables == {}

    def test_url_defaults_without_host(self):
        request = parse_http_event(_v1_event(headers={}, multiValueHeaders={}))
        assert request.url == "https://localhost/orders/17"

    def test_base64_body_decoded(self):
        body = base64.b64encode(b"\x00\x01binary").decode()
        request = parse_http_event(_v1_event(body=body, isBase64Encoded=True))
        assert request.body == b"\x00\x01binary"

    def test_malformed_base64_body(self):
        with pytest.raises(HandlerError):
            parse_http_event(_v1_event(body="***", isBase64Encoded=True))

    def test_missing_body_is_empty(self):
        assert parse_http_event(_v1_event()).body == b""


class TestApiGatewayV2:
    def test_method_and_url_with_query(self):
        request = parse_http_event(_v2_event())
        assert request.method == "POST"
        assert request.url == (
            "https://id.execute-api.us-east-1.amazonaws.com/items?limit=10&sort=asc"
        )

    def test_host_header_preferred_over_domain_name(self):
        event = _v2_event(headers={"host": "custom.example.com"})
        assert parse_http_event(event).url.startswith("https://custom.example.com/items")

    def test_cookies_joined_into_header(self):
        assert parse_http_event(_v2_event()).header("cookie") == "session=abc;theme=dark"

    def test_comma_joined_query_split(self):
        event = _v2_event(queryStringParameters={"id": "1,2"})
        assert parse_http_event(event).query == {"id": ["1", "2"]}

    def test_json_body(self):
        assert parse_http_event(_v2_event()).body_json() == {"name": "widget"}

    def test_invalid_json_body(self):
        with pytest.raises(HandlerError):
            parse_http_event(_v2_event(body="{oops")).body_json()

    def test_request_context_kept(self):
        request = parse_http_event(_v2_event())
        assert request.request_context["http"]["method"] == "POST"


class TestAlb:
    def test_scheme_from_forwarded_proto(self):
        request = parse_http_event(_alb_event())
        assert request.url == "http://lb.example.com/health"
        assert request.origin == RequestOrigin.ALB

    def test_query_values_unescaped(self):
        assert parse_http_event(_alb_event()).query_value("q") == "a b"

    def test_text_body(self):
        assert parse_http_event(_alb_event(body="hello")).body_text() == "hello"


class TestInvalidEvents:
    def test_non_object_event(self):
        with pytest.raises(HandlerError):
            parse_http_event([1, 2, 3])
