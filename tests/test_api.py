"""
Tests for the FastAPI interface
"""

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from xorscope.core.codec import bytes_to_base64
from xorscope.core.xor_ops import repeating_key_xor
from xorscope.interfaces.api import app

client = TestClient(app)


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["service"] == "Xorscope API"


def test_health():
    assert client.get("/health").json()["status"] == "healthy"


def test_break(dickens):
    ciphertext = bytes_to_base64(repeating_key_xor(dickens, b"YELLOW"))
    response = client.post("/break", data={"ciphertext": ciphertext})
    assert response.status_code == 200
    assert response.json()["recoveries"][0]["key"] == "YELLOW"


def test_break_invalid_ciphertext():
    response = client.post("/break", data={"ciphertext": "abc"})
    assert response.status_code == 400
    assert "divisible by 4" in response.json()["detail"]


def test_break_invalid_preset():
    response = client.post("/break", data={"ciphertext": "QUJD", "preset": "reckless"})
    assert response.status_code == 400


def test_break_file(dickens):
    ciphertext = repeating_key_xor(dickens, b"secret")
    response = client.post(
        "/break-file",
        files={"file": ("cipher.bin", ciphertext, "application/octet-stream")},
        data={"encoding": "raw"},
    )
    assert response.status_code == 200
    assert response.json()["recoveries"][0]["key"] == "secret"


def test_break_file_all_blocks_large_upload(dickens):
    ciphertext = repeating_key_xor(dickens * 20, b"YELLOW")
    assert len(ciphertext) >= 10_000
    response = client.post(
        "/break-file",
        files={"file": ("cipher.bin", ciphertext, "application/octet-stream")},
        data={"encoding": "raw", "all_blocks": "true"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["config"]["sample_blocks"] is None
    assert data["config"]["max_sample_blocks"] == 32
    assert data["recoveries"][0]["key"] == "YELLOW"


def test_detect_ecb():
    lines = "\n".join([bytes(range(32)).hex(), (b"Q" * 48).hex()])
    response = client.post("/detect-ecb", data={"ciphertexts": lines})
    assert response.status_code == 200
    detections = response.json()["detections"]
    assert [d["line_number"] for d in detections] == [2]
    assert detections[0]["repeated_blocks"] == 2
