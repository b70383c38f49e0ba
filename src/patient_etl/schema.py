"""Patient dataset columns and the patients table schema."""

NAME = "Name"
GENDER = "Gender"
AGE = "Age"
BLOOD_TYPE = "Blood Type"
MEDICAL_CONDITION = "Medical Condition"
BILLING_AMOUNT = "Billing Amount"
MEDICATION = "Medication"
TEST_RESULTS = "Test Results"
DATE_OF_ADMISSION = "Date of Admission"
ADMISSION_TYPE = "Admission Type"

INPUT_COLUMNS = [
    NAME,
    GENDER,
    AGE,
    BLOOD_TYPE,
    MEDICAL_CONDITION,
    BILLING_AMOUNT,
    MEDICATION,
    TEST_RESULTS,
    DATE_OF_ADMISSION,
    ADMISSION_TYPE,
]

# Name is lowercased during cleaning, then dropped by the projection.
OUTPUT_COLUMNS = [c for c in INPUT_COLUMNS if c != NAME]

LOWERCASE_COLUMNS = [NAME, GENDER]

MIN_AGE = 0
MAX_AGE = 120
BILLING_DIVISOR = 1000.0
DATE_FORMAT = "%Y-%m-%d"

PATIENTS_TABLE = "patients"

# Dataset column -> SQL column, in OUTPUT_COLUMNS order.
SQL_COLUMN_NAMES = {
    GENDER: "gender",
    AGE: "age",
    BLOOD_TYPE: "blood_type",
    MEDICAL_CONDITION: "medical_condition",
    BILLING_AMOUNT: "billing_amount",
    MEDICATION: "medication",
    TEST_RESULTS: "test_results",
    DATE_OF_ADMISSION: "date_of_admission",
    ADMISSION_TYPE: "admission_type",
}
PATIENTS_COLUMNS = [SQL_COLUMN_NAMES[c] for c in OUTPUT_COLUMNS]

ID_COLUMN_DDL = {
    "sqlite": "id INTEGER PRIMARY KEY AUTOINCREMENT",
    "postgresql": "id SERIAL PRIMARY KEY",
}

PATIENTS_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS patients (
    {id_column},
    gender             VARCHAR(32)   NOT NULL,
    age                INTEGER       NOT NULL,
    blood_type         VARCHAR(8)    NOT NULL,
    medical_condition  VARCHAR(255)  NOT NULL,
    billing_amount     DECIMAL(15,6) NOT NULL,
    medication         VARCHAR(255)  NOT NULL,
    test_results       VARCHAR(64)   NOT NULL,
    date_of_admission  DATE          NOT NULL,
    admission_type     VARCHAR(64)   NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_patients_admission ON patients(date_of_admission);
"""


def patients_ddl(dialect: str) -> str:
    """Render the patients DDL for a backend dialect ("sqlite" or "postgresql")."""
    try:
        id_column = ID_COLUMN_DDL[dialect]
    except KeyError:
        raise ValueError(f"Unsupported SQL dialect: {dialect}") from None
    return PATIENTS_TABLE_DDL.format(id_column=id_column)
