import pytest

from proptech.schemas.property import PropertySummary
from proptech.services.reporting import export_inventory, inventory_frame

def summaries():
    return [
        PropertySummary(id=1, title="Casa", price=100000, currency="USD", amenities=["Piscina", "Quincho"]),
        PropertySummary(id=2, title="Terreno", price=50000, currency="USD"),
    ]

def test_inventory_frame_columns():
    df = inventory_frame(summaries())
    assert list(df.columns)[:3] == ["ID", "Título", "Tipo"]
    assert df.loc[0, "Amenidades"] == "Piscina, Quincho"
    assert len(df) == 2

def test_empty_inventory_frame():
    df = inventory_frame([])
    assert df.empty
    assert "Precio" in df.columns

@pytest.mark.asyncio
async def test_export_pdf(backend):
    backend.on("GET", "/api/properties", json={"content": [{"id": 1, "title": "Casa"}]})
    report = await export_inventory("pdf", backend.client())
    assert report.media_type == "application/pdf"
    assert report.content.startswith(b"%PDF")
    assert report.filename.endswith(".pdf")
    assert report.data_uri.startswith("data:application/pdf;base64,")

@pytest.mark.asyncio
async def test_export_csv(backend):
    backend.on("GET", "/api/properties", json=[{"id": 1, "title": "Casa", "amenities": []}])
    report = await export_inventory("csv", backend.client())
    lines = report.content.decode("utf-8").splitlines()
    assert lines[0].startswith("ID,Título")
    assert lines[1].startswith("1,Casa")
