# tests/test_http_client.py
import unittest
from unittest.mock import MagicMock, patch

import requests
from requests.structures import CaseInsensitiveDict

from supabase_rest.registry.http.client import DEFAULT_TIMEOUT, HttpTransport


def _fake_response(status=200, content=b"[]", headers=None):
    resp = MagicMock()
    resp.status_code = status
    resp.content = content
    resp.url = "https://demo.supabase.co/rest/v1/users?select=*"
    resp.headers = CaseInsensitiveDict(
        headers or {"Content-Type": "application/json"}
    )
    return resp


class TestHttpTransport(unittest.TestCase):
    @patch("supabase_rest.registry.http.client.requests.Session")
    def test_send_reads_body_and_closes_session(self, session_cls):
        session_cls.return_value.__exit__.return_value = False
        session = session_cls.return_value.__enter__.return_value
        session.request.return_value = _fake_response(
            status=206, content=b'[{"id":1}]', headers={"Content-Range": "0-0/*"}
        )

        resp = HttpTransport(timeout=5).send(
            "get", "https://demo.supabase.co/rest/v1/users?select=*", {"apikey": "k"}
        )

        self.assertEqual(resp.status, 206)
        self.assertEqual(resp.body, b'[{"id":1}]')
        self.assertEqual(resp.headers["Content-Range"], "0-0/*")
        session.request.assert_called_once_with(
            "GET",
            "https://demo.supabase.co/rest/v1/users?select=*",
            headers={"apikey": "k"},
            data=None,
            timeout=5.0,
            verify=True,
        )
        session_cls.return_value.__exit__.assert_called_once()

    @patch("supabase_rest.registry.http.client.requests.Session")
    def test_transport_error_propagates_and_session_released(self, session_cls):
        session_cls.return_value.__exit__.return_value = False
        session = session_cls.return_value.__enter__.return_value
        session.request.side_effect = requests.ConnectionError("connection refused")

        with self.assertRaises(requests.ConnectionError):
            HttpTransport().send("POST", "https://demo.supabase.co/rest/v1/rpc/f", {}, b"{}")

        session_cls.return_value.__exit__.assert_called_once()

    @patch("supabase_rest.registry.http.client.requests.Session")
    def test_non_2xx_is_returned(self, session_cls):
        session_cls.return_value.__exit__.return_value = False
        session = session_cls.return_value.__enter__.return_value
        session.request.return_value = _fake_response(status=409, content=b'{"code":"23505"}')

        resp = HttpTransport().send("POST", "https://demo.supabase.co/rest/v1/users", {}, b"[]")
        self.assertEqual(resp.status, 409)
        self.assertEqual(resp.body, b'{"code":"23505"}')

    def test_timeout_from_env(self):
        with patch.dict("os.environ", {"SUPABASE_HTTP_TIMEOUT": "7.5"}):
            self.assertEqual(HttpTransport().timeout, 7.5)
        with patch.dict("os.environ", {"SUPABASE_HTTP_TIMEOUT": "nope"}):
            self.assertEqual(HttpTransport().timeout, DEFAULT_TIMEOUT)
