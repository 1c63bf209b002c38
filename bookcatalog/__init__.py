"""Book catalog: book and category management with a rule-checked lifecycle."""
