"""
Payroll report writer.

Renders a ``PayrollRun`` as a plain-text printout, one section per
variant. The layout is informational; consumers should read the
``PayrollRun`` value rather than parse the text.

Writing happens after the run has been committed, so an I/O failure is
reported as ``ReportWriteError`` and never rolls the run back.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from payroll_kernel.domain.values import EmployeeKind, format_amount, format_hours
from payroll_kernel.exceptions import InvalidReportPathError, ReportWriteError
from payroll_kernel.logging_config import get_logger
from payroll_kernel.services.payroll_run import PayGroup, PayrollRun

logger = get_logger("services.report_writer")

_RULE = "=" * 100
_THIN = "-" * 100


def _hourly_section(group: PayGroup) -> list[str]:
    out = [f"{'Nome':<36}{'Horas':>6}{'Extra':>6}{'Bruto':>14}{'Descontos':>12}{'Liquido':>14}  Metodo"]
    for line in group.lines:
        out.append(
            f"{line.name:<36}{format_hours(line.normal_hours):>6}"
            f"{format_hours(line.overtime_hours):>6}{format_amount(line.gross):>14}"
            f"{format_amount(line.deductions):>12}{format_amount(line.net):>14}"
            f"  {line.payment_description}"
        )
    out.append(
        f"{'TOTAL Horistas':<36}{format_hours(group.total_normal_hours):>6}"
        f"{format_hours(group.total_overtime_hours):>6}{format_amount(group.total_gross):>14}"
        f"{format_amount(group.total_deductions):>12}{format_amount(group.total_net):>14}"
    )
    return out


def _salaried_section(group: PayGroup) -> list[str]:
    out = [f"{'Nome':<48}{'Bruto':>14}{'Descontos':>12}{'Liquido':>14}  Metodo"]
    for line in group.lines:
        out.append(
            f"{line.name:<48}{format_amount(line.gross):>14}"
            f"{format_amount(line.deductions):>12}{format_amount(line.net):>14}"
            f"  {line.payment_description}"
        )
    out.append(
        f"{'TOTAL Assalariados':<48}{format_amount(group.total_gross):>14}"
        f"{format_amount(group.total_deductions):>12}{format_amount(group.total_net):>14}"
    )
    return out


def _commissioned_section(group: PayGroup) -> list[str]:
    out = [
        f"{'Nome':<22}{'Fixo':>10}{'Vendas':>10}{'Comissao':>10}"
        f"{'Bruto':>12}{'Descontos':>12}{'Liquido':>12}  Metodo"
    ]
    for line in group.lines:
        out.append(
            f"{line.name:<22}{format_amount(line.base_pay):>10}"
            f"{format_amount(line.sales_total):>10}{format_amount(line.commission):>10}"
            f"{format_amount(line.gross):>12}{format_amount(line.deductions):>12}"
            f"{format_amount(line.net):>12}  {line.payment_description}"
        )
    out.append(
        f"{'TOTAL Comissionados':<22}{'':>10}{format_amount(group.total_sales):>10}{'':>10}"
        f"{format_amount(group.total_gross):>12}{format_amount(group.total_deductions):>12}"
        f"{format_amount(group.total_net):>12}"
    )
    return out


_SECTIONS = {
    EmployeeKind.HOURLY: ("HORISTAS", _hourly_section),
    EmployeeKind.SALARIED: ("ASSALARIADOS", _salaried_section),
    EmployeeKind.COMMISSIONED: ("COMISSIONADOS", _commissioned_section),
}


def render_report(run: PayrollRun) -> str:
    lines = [f"FOLHA DE PAGAMENTO DO DIA {run.run_date.isoformat()}", _RULE]
    for group in run.groups:
        title, section = _SECTIONS[group.kind]
        lines += ["", _RULE, title, _RULE]
        lines += section(group)
        lines.append(_THIN)
    lines += ["", f"TOTAL FOLHA: {format_amount(run.total_net)}", ""]
    return "\n".join(lines)


def write_report(run: PayrollRun, path: Any) -> Path:
    """
    Write the rendered run to ``path``.

    Raises:
        InvalidReportPathError: ``path`` is None or blank.
        ReportWriteError: the operating system refused the write.
    """
    if path is None or not str(path).strip():
        raise InvalidReportPathError(path)
    target = Path(path)
    try:
        target.write_text(render_report(run), encoding="utf-8")
    except OSError as e:
        logger.error(
            "report_write_failed",
            extra={"path": str(target), "reason": str(e)},
        )
        raise ReportWriteError(str(target), str(e)) from e
    logger.info(
        "report_written",
        extra={"path": str(target), "run_date": run.run_date, "lines": len(run.lines)},
    )
    return target
