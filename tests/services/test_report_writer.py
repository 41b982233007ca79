"""Tests for payroll report rendering and writing."""

from decimal import Decimal

import pytest

from payroll_kernel.exceptions import InvalidReportPathError, ReportWriteError
from payroll_kernel.services.report_writer import render_report, write_report


@pytest.fixture
def paid_run(system, hourly, salaried, commissioned):
    emp_id = hourly(name="Ana")
    system.post_timecard(emp_id, "26/12/2005", "9,5")
    salaried(name="Bruno")
    rep = commissioned(name="Carla")
    system.post_sale(rep, "20/12/2005", "1000")
    return system.run_payroll("30/12/2005")


class TestRender:

    def test_sections_in_order(self, paid_run):
        text = render_report(paid_run)
        assert text.startswith("FOLHA DE PAGAMENTO DO DIA 2005-12-30")
        assert text.index("HORISTAS") < text.index("ASSALARIADOS") < text.index("COMISSIONADOS")

    def test_amounts_use_comma(self, paid_run):
        text = render_report(paid_run)
        assert "2000,00" in text
        assert "1484,61" in text

    def test_grand_total(self, paid_run):
        text = render_report(paid_run)
        assert paid_run.total_net == Decimal("3587.11")
        assert "TOTAL FOLHA: 3587,11" in text

    def test_hours_rendered_compactly(self, paid_run):
        hourly_section = render_report(paid_run).split("ASSALARIADOS")[0]
        ana_row = next(line for line in hourly_section.splitlines() if line.startswith("Ana"))
        assert ana_row.split()[1:3] == ["8", "1,5"]

    def test_empty_run_has_every_section(self, system):
        text = render_report(system.run_payroll("6/1/2005"))
        for title in ("HORISTAS", "ASSALARIADOS", "COMISSIONADOS"):
            assert title in text
        assert "TOTAL FOLHA: 0,00" in text


class TestWrite:

    def test_writes_file(self, system, paid_run, tmp_path):
        target = tmp_path / "folha-2005-12-30.txt"
        written = system.write_report(paid_run, target)

        assert written == target
        assert target.read_text(encoding="utf-8") == render_report(paid_run)

    def test_run_with_output_path(self, system, hourly, tmp_path):
        hourly()
        target = tmp_path / "out.txt"
        system.run_payroll("7/1/2005", target)
        assert target.exists()

    @pytest.mark.parametrize("path", [None, "", "   "])
    def test_blank_path(self, paid_run, path):
        with pytest.raises(InvalidReportPathError):
            write_report(paid_run, path)

    def test_write_error_keeps_run(self, system, hourly, tmp_path, captured_logs):
        emp_id = hourly()
        system.set_union_membership(emp_id, "s1", "1")
        missing_dir = tmp_path / "missing" / "out.txt"

        with pytest.raises(ReportWriteError):
            system.run_payroll("7/1/2005", missing_dir)

        assert system.engine.undo_depth == 3
        assert system.state.get(emp_id).union.last_paid_date is not None
        assert any(r["message"] == "report_write_failed" for r in captured_logs())

    def test_success_logged(self, paid_run, tmp_path, captured_logs):
        write_report(paid_run, tmp_path / "ok.txt")
        written = [r for r in captured_logs() if r["message"] == "report_written"]
        assert written[0]["lines"] == 3
