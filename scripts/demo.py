import logging
import sys

from maskview.core.view import read_csv
from maskview.logging_config import configure_logging

configure_logging(level=logging.WARNING, force_format="plain")

path = sys.argv[1] if len(sys.argv) > 1 else "data/demo.csv"
df = read_csv(path, arity=4)
print(df)

col3, col4 = df("col3", "col4").cols_to_lists(int, float)
print("col3:", col3)
print("col4:", col4)

print("\nPROJECTION")
print(df("col2", "col4"))

print("\nIS_IN")
print(df.select_rows(df("col1").is_in(range(1, 11))))

print("\nLOGICAL OPERATORS")
print(df.select_rows((df("col2") < (10,)) | (df("col3") > (200,))))

print("\nARRAY EXPORT")
print(df.select_rows(df("col2", "col3") < (50, 50)).to_array(float))
