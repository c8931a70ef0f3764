#!/usr/bin/env python
"""
Generate sample documents for trying out pagerecon.

This script creates:
- A one-page resume PDF (title, contact lines, headings, skill table)
- A two-page PDF with a column-aligned table
- A resume DOCX

Usage:
    python examples/generate_samples.py
    pagerecon --input examples/sample_docs/resume.pdf --output ./output --format all
"""

import json
from pathlib import Path


def create_resume_pdf() -> bytes:
    """Create a resume-like PDF page."""
    import fitz

    doc = fitz.open()
    page = doc.new_page(width=595, height=842)

    page.insert_text((230, 60), "Jane Doe", fontname="hebo", fontsize=22)
    page.insert_text((170, 85), "jane.doe@example.com | +1 555 123 4567", fontname="helv", fontsize=10)
    page.insert_text((185, 100), "linkedin.com/in/janedoe | github.com/janedoe", fontname="helv", fontsize=10)

    y = 140
    page.insert_text((50, y), "Technical Skills", fontname="hebo", fontsize=14)
    for row in (
        "Programming Languages: Go, Rust, Python",
        "Frameworks & Libraries: React, Django",
        "Developer Tools: Git, Docker",
    ):
        y += 18
        page.insert_text((50, y), row, fontname="helv", fontsize=11)

    y += 35
    page.insert_text((50, y), "Work Experience", fontname="hebo", fontsize=14)
    y += 20
    page.insert_text((50, y), "Software Engineer, Acme Corp", fontname="hebo", fontsize=11)
    page.insert_text((450, y), "2021 - Present", fontname="heit", fontsize=11)
    for line in (
        "Built a billing service handling millions of events per day.",
        "Led the migration of legacy jobs to a streaming pipeline.",
    ):
        y += 16
        page.insert_text((60, y), line, fontname="helv", fontsize=11)

    data = doc.tobytes()
    doc.close()
    return data


def create_two_page_pdf() -> bytes:
    """Create a two-page PDF whose second page has a column-aligned table."""
    import fitz

    doc = fitz.open()

    page = doc.new_page()
    page.insert_text((50, 80), "Project Report", fontname="hebo", fontsize=20)
    page.insert_text((50, 120), "This report summarizes the quarter.", fontname="helv", fontsize=11)

    page = doc.new_page()
    page.insert_text((50, 80), "Projects", fontname="hebo", fontsize=14)
    for i, (name, status) in enumerate((("Ingest", "Done"), ("Search", "In progress"))):
        y = 110 + i * 18
        page.insert_text((50, y), f"{name}:", fontname="helv", fontsize=11)
        page.insert_text((250, y), status, fontname="helv", fontsize=11)

    data = doc.tobytes()
    doc.close()
    return data


def create_resume_docx(path: Path):
    """Create a resume-like DOCX file."""
    from docx import Document

    doc = Document()
    doc.add_heading("Jane Doe", level=1)
    doc.add_paragraph("jane.doe@example.com | +1 555 123 4567")
    doc.add_heading("Experience", level=2)
    p = doc.add_paragraph("Software Engineer at ")
    p.add_run("Acme Corp").bold = True
    doc.add_paragraph("Built a billing service", style="List Bullet")
    doc.add_paragraph("Led a pipeline migration", style="List Bullet")

    table = doc.add_table(rows=3, cols=2)
    for r, (skill, level) in enumerate((("Skill", "Level"), ("Go", "Expert"), ("Rust", "Intermediate"))):
        table.cell(r, 0).text = skill
        table.cell(r, 1).text = level

    doc.save(str(path))


def create_expected_output(filename: str, description: str) -> dict:
    """Create an expected output template for a sample."""
    return {
        "filename": filename,
        "description": description,
        "expected_roles": [],
        "expected_tables": 0,
        "notes": "This is a template - actual expected values should be filled manually"
    }


def main():
    samples_dir = Path(__file__).parent / "sample_docs"
    expected_dir = Path(__file__).parent / "expected_outputs"
    samples_dir.mkdir(exist_ok=True)
    expected_dir.mkdir(exist_ok=True)

    samples = [
        ("resume.pdf", create_resume_pdf(), "One-page resume"),
        ("report.pdf", create_two_page_pdf(), "Two-page report with a column table"),
    ]

    for name, data, description in samples:
        path = samples_dir / name
        path.write_bytes(data)
        print(f"Created: {path}")

        expected_path = expected_dir / f"{Path(name).stem}.json"
        with open(expected_path, 'w') as f:
            json.dump(create_expected_output(name, description), f, indent=2)
        print(f"Created: {expected_path}")

    docx_path = samples_dir / "resume.docx"
    create_resume_docx(docx_path)
    print(f"Created: {docx_path}")

    print("\nSample generation complete!")


if __name__ == "__main__":
    main()
