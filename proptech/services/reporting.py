import base64
import io
from datetime import datetime, timezone
from typing import List

import pandas as pd
from pydantic import BaseModel
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table
from reportlab.lib.styles import getSampleStyleSheet
from structlog import get_logger

from proptech.clients.backend import BackendClient
from proptech.schemas.property import PropertySummary
from proptech.services.properties import PropertyService

logger = get_logger()

COLUMNS = {
    "id": "ID",
    "title": "Título",
    "type": "Tipo",
    "status": "Estado",
    "price": "Precio",
    "currency": "Moneda",
    "bedrooms": "Dormitorios",
    "bathrooms": "Baños",
    "area": "Área (m²)",
    "address": "Dirección",
    "amenities": "Amenidades",
}

class ReportFile(BaseModel):
    filename: str
    media_type: str
    content: bytes

    @property
    def data_uri(self) -> str:
        b64 = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.media_type};base64,{b64}"

def inventory_frame(properties: List[PropertySummary]) -> pd.DataFrame:
    rows = []
    for p in properties:
        row = p.model_dump(include=set(COLUMNS))
        row["amenities"] = ", ".join(p.amenities)
        rows.append(row)
    df = pd.DataFrame(rows, columns=list(COLUMNS))
    return df.rename(columns=COLUMNS)

def inventory_csv(df: pd.DataFrame) -> bytes:
    buffer = io.StringIO()
    df.to_csv(buffer, index=False)
    return buffer.getvalue().encode("utf-8")

def inventory_pdf(df: pd.DataFrame) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=landscape(A4))
    styles = getSampleStyleSheet()
    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    if df.empty:
        table_data = [["Mensaje", "No hay propiedades para mostrar"]]
    else:
        table_data = [list(df.columns)] + df.fillna("").astype(str).values.tolist()
    doc.build([
        Paragraph("Inventario de propiedades", styles["Title"]),
        Paragraph(f"Generado: {generated} · Total: {len(df)}", styles["Normal"]),
        Spacer(1, 12),
        Table(table_data, repeatRows=1),
    ])
    return buffer.getvalue()

async def export_inventory(report_format: str = "csv", client: BackendClient | None = None, **filters) -> ReportFile:
    properties = await PropertyService(client).list_summaries(**filters)
    df = inventory_frame(properties)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    if report_format == "pdf":
        report = ReportFile(filename=f"inventario_{stamp}.pdf", media_type="application/pdf", content=inventory_pdf(df))
    else:
        report = ReportFile(filename=f"inventario_{stamp}.csv", media_type="text/csv", content=inventory_csv(df))
    logger.info("Inventory report generated", format=report_format, rows=len(df))
    return report
