# tests/test_ocr_parsing.py
from app.visionsystem.vision_client import extract_labs, strip_labs_block

REPLY = """Hemograma 03/07
Hb 8,2 g/dL  Leuco 300/mm3  Plaq 12.000

```json
{"Hb": "8,2", "Leuco": "300", "Plaq": 12000}
```"""


def test_fenced_block_is_parsed():
    assert extract_labs(REPLY) == {"Hb": "8,2", "Leuco": "300", "Plaq": "12000"}


def test_trailing_bare_object():
    assert extract_labs('Cr 1,4\n{"Cr": "1,4"}') == {"Cr": "1,4"}


def test_text_after_fenced_block():
    assert extract_labs('```json\n{"K": "3,1"}\n```\nObs: amostra hemolisada') == {"K": "3,1"}


def test_no_labs():
    assert extract_labs("Imagem ilegível") is None
    assert extract_labs("```json\n{not json}\n```") is None
    assert extract_labs("```json\n{}\n```") is None


def test_strip_labs_block():
    assert strip_labs_block(REPLY) == "Hemograma 03/07\nHb 8,2 g/dL  Leuco 300/mm3  Plaq 12.000"


class _CannedVisionModel:
    def __init__(self, reply):
        self.reply = reply

    def analyze_image(self, image, prompt=None):
        return self.reply


def test_read_lab_sheet_splits_transcription(monkeypatch):
    from PIL import Image

    from app.visionsystem.vision_client import vision_client

    monkeypatch.setattr(vision_client, "_get_client", lambda: _CannedVisionModel(REPLY))

    result = vision_client.read_lab_sheet(Image.new("RGB", (10, 10)))

    assert result["structured"] is True
    assert result["labs"]["Hb"] == "8,2"
    assert "```" not in result["text"]


def test_read_lab_sheet_without_json(monkeypatch):
    from PIL import Image

    from app.visionsystem.vision_client import vision_client

    monkeypatch.setattr(vision_client, "_get_client", lambda: _CannedVisionModel("  Hb 8,2  "))

    result = vision_client.read_lab_sheet(Image.new("RGB", (10, 10)))

    assert result == {"text": "Hb 8,2", "labs": None, "structured": False, "model": result["model"]}
