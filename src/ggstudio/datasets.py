"""Small sample datasets for examples and docs."""

_TIPS_COLUMNS = ("total_bill", "tip", "sex", "smoker", "day", "time", "size")

# first rows of the restaurant tips dataset (Bryant & Smith, 1995)
_TIPS_ROWS = [
    (16.99, 1.01, "Female", "No", "Sun", "Dinner", 2),
    (10.34, 1.66, "Male", "No", "Sun", "Dinner", 3),
    (21.01, 3.50, "Male", "No", "Sun", "Dinner", 3),
    (23.68, 3.31, "Male", "No", "Sun", "Dinner", 2),
    (24.59, 3.61, "Female", "No", "Sun", "Dinner", 4),
    (25.29, 4.71, "Male", "No", "Sun", "Dinner", 4),
    (8.77, 2.00, "Male", "No", "Sun", "Dinner", 2),
    (26.88, 3.12, "Male", "No", "Sun", "Dinner", 4),
    (15.04, 1.96, "Male", "No", "Sun", "Dinner", 2),
    (14.78, 3.23, "Male", "No", "Sun", "Dinner", 2),
    (10.27, 1.71, "Male", "No", "Sun", "Dinner", 2),
    (35.26, 5.00, "Female", "No", "Sun", "Dinner", 4),
    (15.42, 1.57, "Male", "No", "Sun", "Dinner", 2),
    (18.43, 3.00, "Male", "No", "Sun", "Dinner", 4),
    (14.83, 3.02, "Female", "No", "Sun", "Dinner", 2),
    (21.58, 3.92, "Male", "No", "Sun", "Dinner", 2),
    (10.33, 1.67, "Female", "No", "Sun", "Dinner", 3),
    (16.29, 3.71, "Male", "No", "Sun", "Dinner", 3),
    (16.97, 3.50, "Female", "No", "Sun", "Dinner", 3),
    (20.65, 3.35, "Male", "No", "Sat", "Dinner", 3),
]


def tips() -> list[dict]:
    """Restaurant tips: bill, tip, and details of the party, one dict per table."""
    return [dict(zip(_TIPS_COLUMNS, row)) for row in _TIPS_ROWS]
