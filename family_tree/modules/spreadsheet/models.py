# No table of its own: reads and writes the tables registered in service.TABLES
# This file documents the workbook layout

"""
Export workbook:
- one sheet per exported table, titled with the table name
- row 1 holds the backend column names in bold, one record per following row
- array columns are written as comma separated text

Template workbook:
- sheet 'البيانات': the editable columns of one table (no primary key, no timestamps)
- sheet 'تعليمات': usage notes, one per row

Import workbook:
- the first sheet is read; row 1 holds column names
- rows with a primary key update the stored record, rows without one are inserted
- timestamp columns are dropped, unknown columns are reported and ignored
"""
