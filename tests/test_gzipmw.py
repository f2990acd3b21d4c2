import gzip

from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Response

from metricsalerts.gzipmw import with_gzip


def _echo(request):
    return Response(request.get_data())


def _request(data=b"", headers=None):
    return EnvironBuilder(method="POST", data=data, headers=headers or {}).get_request()


def test_response_compressed_when_accepted():
    wrapped = with_gzip(lambda request: Response("hello"))
    resp = wrapped(_request(headers={"Accept-Encoding": "deflate, gzip"}))
    assert resp.headers["Content-Encoding"] == "gzip"
    assert gzip.decompress(resp.get_data()) == b"hello"


def test_response_plain_when_not_accepted():
    wrapped = with_gzip(lambda request: Response("hello"))
    resp = wrapped(_request())
    assert resp.get_data() == b"hello"
    assert "Content-Encoding" not in resp.headers


def test_error_response_not_compressed():
    wrapped = with_gzip(lambda request: Response("missing", status=404))
    resp = wrapped(_request(headers={"Accept-Encoding": "gzip"}))
    assert resp.status_code == 404
    assert resp.get_data() == b"missing"
    assert "Content-Encoding" not in resp.headers


def test_gzipped_request_body_is_decoded():
    payload = b'{"id":"Alloc"}'
    wrapped = with_gzip(_echo)
    resp = wrapped(_request(gzip.compress(payload), {"Content-Encoding": "gzip"}))
    assert resp.get_data() == payload


def test_bad_gzip_body_gives_500():
    calls = []

    def handler(request):
        calls.append(request)
        return Response("ok")

    resp = with_gzip(handler)(_request(b"not gzip", {"Content-Encoding": "gzip"}))
    assert resp.status_code == 500
    assert calls == []