"""Tests for hardware detection helpers."""

from __future__ import annotations

from types import SimpleNamespace

from imagex.utils import devices


def test_detect_torch_device_without_torch(monkeypatch):
    monkeypatch.setattr(devices, "torch", None)

    device, message = devices.detect_torch_device()

    assert device == "cpu"
    assert "PyTorch is not installed" in message


def test_detect_torch_device_prefers_cuda(monkeypatch):
    class FakeCuda:
        @staticmethod
        def is_available() -> bool:
            return True

        @staticmethod
        def current_device() -> int:
            return 1

        @staticmethod
        def get_device_name(index: int) -> str:
            return f"Fake GPU {index}"

    fake_torch = SimpleNamespace(
        cuda=FakeCuda(),
        backends=SimpleNamespace(mps=SimpleNamespace(is_available=lambda: True)),
    )
    monkeypatch.setattr(devices, "torch", fake_torch)

    device, message = devices.detect_torch_device()

    assert device == "cuda:1"
    assert "Fake GPU 1" in message


def test_detect_torch_device_mps(monkeypatch):
    fake_torch = SimpleNamespace(
        cuda=SimpleNamespace(is_available=lambda: False),
        backends=SimpleNamespace(mps=SimpleNamespace(is_available=lambda: True)),
    )
    monkeypatch.setattr(devices, "torch", fake_torch)

    device, message = devices.detect_torch_device("mps")

    assert device == "mps"
    assert "MPS backend" in message


def test_detect_torch_device_respects_cpu_preference(monkeypatch):
    fake_torch = SimpleNamespace(
        cuda=SimpleNamespace(is_available=lambda: True),
        backends=SimpleNamespace(mps=SimpleNamespace(is_available=lambda: True)),
    )
    monkeypatch.setattr(devices, "torch", fake_torch)

    device, _ = devices.detect_torch_device("cpu")

    assert device == "cpu"


def test_pipeline_device_mapping():
    assert devices.pipeline_device("cuda:2") == 2
    assert devices.pipeline_device("cuda") == 0
    assert devices.pipeline_device("mps") == "mps"
    assert devices.pipeline_device("cpu") == -1


def test_detect_torch_device_falls_back_when_request_unavailable(monkeypatch):
    fake_torch = SimpleNamespace(
        cuda=SimpleNamespace(is_available=lambda: False),
        backends=SimpleNamespace(),
    )
    monkeypatch.setattr(devices, "torch", fake_torch)

    device, message = devices.detect_torch_device("cuda")

    assert device == "cpu"
    assert "'cuda' is not available" in message
