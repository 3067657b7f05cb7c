import datetime

import dateutil.parser


def to_datetime(date):
    if isinstance(date, str):
        date = dateutil.parser.parse(date)
    elif isinstance(date, datetime.date) and not isinstance(date, datetime.datetime):
        date = datetime.datetime(date.year, date.month, date.day)

    return date


def long_date(date):
    return to_datetime(date).strftime("%B %d, %Y")


def date_to_xml_string(date):
    return to_datetime(date).strftime("%Y-%m-%dT%H:%M:%S")


def archive_date(date):
    return to_datetime(date).strftime("%Y/%m")


def year(date):
    return to_datetime(date).strftime("%Y")
