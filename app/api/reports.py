"""
Reports API - rapports par période et export CSV
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
import csv
import io

from database.connection import get_db
from app.models import ReportResponse
from app.core import ReportPeriod
from app.core.errors import http_error
from services.reports import ReportService

router = APIRouter(prefix="/api/reports", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


@router.get("", response_model=ReportResponse)
async def get_report(
    period: ReportPeriod = Query(ReportPeriod.CURRENT_MONTH),
    service: ReportService = Depends(get_report_service)
):
    """
    Rapport de la période

    **Ventes:** chiffre d'affaires, nombre, panier moyen (ventes terminées)
    **Production:** quantité produite, ordres, efficacité (produit / planifié)
    **Stock:** lignes, stock faible, valeur
    **Tendance:** 6 derniers mois (ventes, production, dépenses)
    """
    try:
        return service.generate(period)
    except Exception as e:
        raise http_error(e)


@router.get("/export/csv")
async def export_csv(
    period: ReportPeriod = Query(ReportPeriod.CURRENT_MONTH),
    service: ReportService = Depends(get_report_service)
):
    """Indicateurs du rapport en CSV (Indicateur,Valeur)"""
    try:
        report = service.generate(period)

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(['Indicateur', 'Valeur'])
        for label, value in service.csv_rows(report):
            writer.writerow([label, value])

        writer.writerow(['', ''])
        writer.writerow(['Mois', "Ventes", "Production", "Dépenses"])
        for month in report['monthly']:
            writer.writerow([month['month'], month['sales'], month['production'], month['expenses']])

        output.seek(0)
        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename=rapport_{period.value}_{report['start_date']}.csv"}
        )

    except Exception as e:
        raise http_error(e)
