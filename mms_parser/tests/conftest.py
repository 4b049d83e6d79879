import logging

import pytest

from mms_parser.mime_adapter import EmailMimeAdapter

JPEG_B64 = b"/9j/4AAQSkZJRg=="
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF"

CARRIER_MESSAGE = (
    b"From: foo@example-carrier.co.uk\n"
    b"To: bar@example.com\n"
    b"Subject: Holiday snap\n"
    b"Date: Mon, 17 Oct 2005 10:00:00 +0100\n"
    b"MIME-Version: 1.0\n"
    b"Content-Type: multipart/mixed; boundary=\"outer\"\n"
    b"\n"
    b"--outer\n"
    b"Content-Type: text/plain\n"
    b"\n"
    b"hello\n"
    b"--outer\n"
    b"Content-Type: image/jpeg; name=\"pic.jpg\"\n"
    b"Content-Disposition: attachment; filename=\"pic.jpg\"\n"
    b"Content-Transfer-Encoding: base64\n"
    b"\n"
    + JPEG_B64 + b"\n"
    b"--outer--\n"
)

NESTED_MESSAGE = (
    b"From: foo@example-carrier.co.uk\n"
    b"To: bar@example.com\n"
    b"Subject: Nested\n"
    b"MIME-Version: 1.0\n"
    b"Content-Type: multipart/mixed; boundary=\"outer\"\n"
    b"\n"
    b"--outer\n"
    b"From: intruder@example.org\n"
    b"Subject: Inner subject\n"
    b"Content-Type: multipart/alternative; boundary=\"inner\"\n"
    b"\n"
    b"--inner\n"
    b"Content-Type: text/plain\n"
    b"\n"
    b" and nested\n"
    b"--inner\n"
    b"Content-Type: text/html\n"
    b"\n"
    b"<p>nested</p>\n"
    b"--inner--\n"
    b"--outer\n"
    b"Content-Type: text/plain\n"
    b"\n"
    b"hello\n"
    b"--outer\n"
    b"Content-Type: image/gif; name=\"a.gif\"\n"
    b"\n"
    b"GIF89a\n"
    b"--outer\n"
    b"Content-Type: text/plain\n"
    b"\n"
    b" world\n"
    b"--outer--\n"
)

SIBLING_MULTIPARTS_MESSAGE = (
    b"From: foo@example-carrier.co.uk\n"
    b"MIME-Version: 1.0\n"
    b"Content-Type: multipart/mixed; boundary=\"outer\"\n"
    b"\n"
    b"--outer\n"
    b"Content-Type: multipart/related; boundary=\"first\"\n"
    b"\n"
    b"--first\n"
    b"Content-Type: text/plain\n"
    b"\n"
    b"first\n"
    b"--first\n"
    b"Content-Type: image/png; name=\"one.png\"\n"
    b"\n"
    b"PNG1\n"
    b"--first--\n"
    b"--outer\n"
    b"Content-Type: multipart/related; boundary=\"second\"\n"
    b"\n"
    b"--second\n"
    b"Content-Type: text/plain\n"
    b"\n"
    b"second\n"
    b"--second\n"
    b"Content-Type: image/png; name=\"two.png\"\n"
    b"\n"
    b"PNG2\n"
    b"--second--\n"
    b"--outer--\n"
)

VODAFONE_MESSAGE = (
    b"From: 447700900123@mms.vodafone.co.uk\n"
    b"To: someone@example.com\n"
    b"Subject: MMS\n"
    b"MIME-Version: 1.0\n"
    b"Content-Type: multipart/related; boundary=\"vf\"\n"
    b"\n"
    b"--vf\n"
    b"Content-Type: application/smil; name=\"pres.smil\"\n"
    b"\n"
    b"<smil><body><par><img src=\"photo.jpg\"/></par></body></smil>\n"
    b"--vf\n"
    b"Content-Type: text/html; charset=utf-8\n"
    b"\n"
    b"<html><body><p>Hello from Brighton</p></body></html>\n"
    b"--vf\n"
    b"Content-Type: image/jpeg; name=\"photo.jpg\"\n"
    b"Content-Transfer-Encoding: base64\n"
    b"\n"
    + JPEG_B64 + b"\n"
    b"--vf--\n"
)


@pytest.fixture
def logger():
    return logging.getLogger("mms_parser.tests")


@pytest.fixture
def adapter(logger):
    return EmailMimeAdapter(logger)


@pytest.fixture
def carrier_message():
    return CARRIER_MESSAGE


@pytest.fixture
def nested_message():
    return NESTED_MESSAGE


@pytest.fixture
def sibling_multiparts_message():
    return SIBLING_MULTIPARTS_MESSAGE


@pytest.fixture
def vodafone_message():
    return VODAFONE_MESSAGE
