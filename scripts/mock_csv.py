import numpy as np
from pathlib import Path

n_rows = 20

rng = np.random.default_rng(0)
col1 = np.arange(1, n_rows + 1)
col2 = rng.integers(0, 100, size=n_rows)
col3 = rng.integers(0, 400, size=n_rows)
col4 = rng.normal(size=n_rows).round(3)

Path("data").mkdir(exist_ok=True)
with open("data/demo.csv", "w") as f:
    f.write("col1,col2,col3,col4\n")
    for row in zip(col1, col2, col3, col4):
        f.write(",".join(str(v) for v in row) + "\n")

print("wrote data/demo.csv", (n_rows, 4))
