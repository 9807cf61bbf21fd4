from docx import Document


def generate_report_docx(report: dict, file_path: str):
    doc = Document()

    # Title
    doc.add_heading(report.get("title", "IQ Test Results"), level=1)

    # Summary
    doc.add_heading("Summary", level=2)
    for line in report["summary"]:
        doc.add_paragraph(line)

    # Categories
    if report["categories"]:
        doc.add_heading("Category Breakdown", level=2)
        for line in report["categories"]:
            doc.add_paragraph(line, style="List Bullet")

    if report["strengths"]:
        doc.add_heading("Strengths", level=2)
        for s in report["strengths"]:
            doc.add_paragraph(s, style="List Bullet")

    if report["weaknesses"]:
        doc.add_heading("Areas to Improve", level=2)
        for w in report["weaknesses"]:
            doc.add_paragraph(w, style="List Bullet")

    doc.add_paragraph(f"Generated on {report['generated_at'][:10]}")

    doc.save(file_path)
