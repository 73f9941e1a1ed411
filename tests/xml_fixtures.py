"""Schema and document snippets shared by the test modules."""

import os
import tempfile

XS = 'xmlns:xs="http://www.w3.org/2001/XMLSchema"'

INVOICE_XSD = f"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema {XS}>
  <xs:simpleType name="SkuType">
    <xs:restriction base="xs:string">
      <xs:minLength value="3"/>
      <xs:maxLength value="8"/>
      <xs:pattern value="[A-Z]+-[0-9]+"/>
    </xs:restriction>
  </xs:simpleType>
  <xs:simpleType name="AmountType">
    <xs:restriction base="xs:decimal">
      <xs:totalDigits value="6"/>
      <xs:fractionDigits value="2"/>
      <xs:minInclusive value="0"/>
    </xs:restriction>
  </xs:simpleType>
  <xs:complexType name="Line">
    <xs:sequence>
      <xs:element name="sku" type="SkuType"/>
      <xs:element name="amount" type="AmountType"/>
    </xs:sequence>
  </xs:complexType>
  <xs:complexType name="Invoice">
    <xs:sequence>
      <xs:element name="header" type="xs:string"/>
      <xs:element name="line" type="Line" maxOccurs="unbounded"/>
      <xs:element name="footer" type="xs:string"/>
    </xs:sequence>
    <xs:attribute name="id" type="xs:string" use="required"/>
    <xs:attribute name="currency" type="xs:string" default="EUR"/>
  </xs:complexType>
  <xs:element name="invoice" type="Invoice"/>
</xs:schema>
"""

VALID_INVOICE = """<?xml version="1.0" encoding="UTF-8"?>
<invoice id="INV-1">
  <header>ACME</header>
  <line><sku>AB-12</sku><amount>10.50</amount></line>
  <line><sku>CD-34</sku><amount>3.00</amount></line>
  <footer>Thanks</footer>
</invoice>
"""

BAD_AMOUNT_INVOICE = """<invoice id="INV-2">
  <header>ACME</header>
  <line><sku>AB-12</sku><amount>10.505</amount></line>
  <footer>Thanks</footer>
</invoice>
"""

DOCUMENT_XSD = f"""<xs:schema {XS}>
  <xs:element name="document">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="header" type="xs:string"/>
        <xs:element name="body" type="xs:string"/>
        <xs:element name="footer" type="xs:string"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

VALID_DOCUMENT = """<document>
  <header>Top</header>
  <body>Middle</body>
  <footer>Bottom</footer>
</document>
"""

SWAPPED_DOCUMENT = """<document>
  <header>Top</header>
  <footer>Bottom</footer>
  <body>Middle</body>
</document>
"""

BOOK_XSD = f"""<xs:schema {XS}>
  <xs:element name="book">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="title" type="xs:string"/>
        <xs:element name="author" type="xs:string"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

SHORT_TITLE_BOOK = """<book>
  <title>short</title>
  <author>Jane Doe</author>
</book>
"""

ABC_XSD = f"""<xs:schema {XS}>
  <xs:element name="root">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="a" type="xs:string"/>
        <xs:element name="b" type="xs:string"/>
        <xs:element name="c" type="xs:string"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""


def abc_document(*names):
    children = "".join(f"<{n}>x</{n}>" for n in names)
    return f"<root>{children}</root>"


class TempDir:
    """Temporary directory that writes fixture files on demand."""

    def __init__(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = self._tmp.name

    def write(self, name, content):
        path = os.path.join(self.path, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def cleanup(self):
        self._tmp.cleanup()
