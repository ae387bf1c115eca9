import io

from nachosim.statistics import Statistics


def test_fresh_report_is_all_zero():
    assert Statistics().report() == (
        "Ticks: total 0, idle 0, system 0, user 0\n"
        "Disk I/O: reads 0, writes 0\n"
        "Console I/O: reads 0, writes 0\n"
        "Paging: faults 0\n"
    )


def test_report_reflects_counters():
    s = Statistics()
    s.total_ticks = 150
    s.idle_ticks = 20
    s.system_ticks = 120
    s.user_ticks = 10
    s.num_disk_reads = 3
    s.num_disk_writes = 4
    s.num_console_chars_read = 5
    s.num_console_chars_written = 6
    s.num_page_faults = 2
    assert s.report().splitlines() == [
        "Ticks: total 150, idle 20, system 120, user 10",
        "Disk I/O: reads 3, writes 4",
        "Console I/O: reads 5, writes 6",
        "Paging: faults 2",
    ]


def test_swap_line_only_when_enabled():
    s = Statistics(num_swap_in_pages=7, num_swap_out_pages=8)
    assert "Swap" not in s.report()
    s.swap_enabled = True
    assert s.report().splitlines()[-1] == "Swap: pages in 7, pages out 8"


def test_tick_reset_warning_leads_report():
    s = Statistics(tick_resets=2)
    lines = s.report().splitlines()
    assert lines[0] == (
        "WARNING: the tick counter was reset 2 times;"
        " the following statistics may be invalid."
    )
    assert lines[1] == ""
    assert lines[2].startswith("Ticks: total 0")


def test_dump_writes_report():
    s = Statistics(total_ticks=42, user_ticks=42)
    out = io.StringIO()
    s.dump(out)
    assert out.getvalue() == s.report()


def test_dump_defaults_to_stdout(capsys):
    s = Statistics(num_page_faults=9)
    s.dump()
    assert capsys.readouterr().out == s.report()