"""Core reading modules.

WHY: The core package contains the stable heart of the project: the IR
dataclasses and the parsing engine. Everything else (CSR conversion,
analysis, formatters, CLI) consumes what it produces.

HOW: ir.py defines the data structures, header.py parses the banner and
dimension line, coercion.py converts values to the caller's scalar type,
assembler.py builds the entry list, reader.py ties them to files, and
csr.py converts the result to compressed-row form.

RULES:
- IR dataclasses are the contract; change with care
- Parsing logic is consumer-agnostic: no analysis or output logic here
"""
