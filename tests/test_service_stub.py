import json
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from bibtex_import_client.client import BibtexImportClient
from bibtex_import_client.cli import EXAMPLE_ENTRY
from bibtex_import_client.errors import ServiceConnectionError


class StubHandler(BaseHTTPRequestHandler):
    received = []

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        StubHandler.received.append(body)

        if self.path == "/slow":
            time.sleep(1.0)
        if self.path == "/reject":
            self._send(400, b"failed to parse BibTeX data", "text/plain")
            return

        payload = json.dumps({"id": "an-id", "title": "A Title"}).encode("utf-8")
        self._send(200, payload, "application/json")

    def _send(self, status, payload, content_type):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def stub_url():
    StubHandler.received = []
    server = ThreadingHTTPServer(("127.0.0.1", 0), StubHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address
    yield f"http://{host}:{port}"
    server.shutdown()
    server.server_close()


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_example_entry_round_trip(stub_url):
    with BibtexImportClient(f"{stub_url}/import-bibtex") as client:
        resp = client.submit(EXAMPLE_ENTRY)

    assert resp.status_code == 200
    assert resp.status_message == "OK"
    assert resp.json == {"id": "an-id", "title": "A Title"}
    assert StubHandler.received == [EXAMPLE_ENTRY]


def test_utf8_body_is_sent_verbatim(stub_url):
    text = '@book{b, author = "Antonín Dvořák"}'
    with BibtexImportClient(f"{stub_url}/import-bibtex") as client:
        client.submit(text)

    assert StubHandler.received == [text]


def test_non_200_from_service(stub_url):
    with BibtexImportClient(f"{stub_url}/reject") as client:
        resp = client.submit("@broken")

    assert resp.status_code == 400
    assert resp.status_message == "Bad Request"
    assert resp.json is None


def test_read_timeout(stub_url):
    with BibtexImportClient(f"{stub_url}/slow", read_timeout_seconds=0.2) as client:
        with pytest.raises(ServiceConnectionError):
            client.submit(EXAMPLE_ENTRY)


def test_connection_refused_is_reported_not_raised():
    url = f"http://127.0.0.1:{_closed_port()}/import-bibtex"
    with BibtexImportClient(url, connect_timeout_seconds=1) as client:
        result = client.submit_safely(EXAMPLE_ENTRY)

    assert not result.ok
    assert str(result.error).startswith("failed to connect to service: ")
