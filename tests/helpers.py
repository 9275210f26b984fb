"""Shared builders for test log lines and records."""

from access_log_analyzer.parser import parse_line


def make_line(
    ip="127.0.0.1",
    date="10/Oct/2020:13:55:36 +0000",
    method="GET",
    url="/index.html",
    status="200",
    size="1024",
    referer="-",
    agent="Mozilla/5.0",
) -> str:
    return f'{ip} - - [{date}] "{method} {url} HTTP/1.1" {status} {size} "{referer}" "{agent}"'


def make_record(line_number=0, **kwargs):
    return parse_line(make_line(**kwargs), line_number=line_number)
