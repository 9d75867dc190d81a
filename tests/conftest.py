import pytest

from meritwise.catalog import ProgramCatalog
from meritwise.schemas import (
    EquivalenceCurriculum, LocalCurriculum, MeritRecord, Program, ProgramOption, UserInterests,
)

@pytest.fixture
def local():
    return LocalCurriculum(hsc_percentage=85, ssc_percentage=90)

@pytest.fixture
def equivalence():
    return EquivalenceCurriculum(equivalence_percentage=80)

@pytest.fixture
def programs():
    return [
        Program(id="se-h12", name="Software Engineering", campus="H-12", school="SEECS",
                discipline_group="Computing", seats=120),
        Program(id="me-h12", name="Mechanical Engineering", campus="H-12", school="SMME",
                discipline_group="Engineering", seats=100),
        Program(id="ee-rwp", name="Electrical Engineering", campus="Rawalpindi", school="MCE",
                discipline_group="Engineering", seats=90),
        Program(id="bba-h12", name="Business Administration", campus="H-12", school="NBS",
                discipline_group="Business"),
    ]

@pytest.fixture
def history():
    rows = [
        MeritRecord(program_id="se-h12", year=2023, round_number=1, closing_aggregate=81.0),
        MeritRecord(program_id="se-h12", year=2023, round_number=3, closing_aggregate=78.5),
        MeritRecord(program_id="se-h12", year=2024, round_number=1, closing_aggregate=80.0),
        MeritRecord(program_id="se-h12", year=2024, round_number=2, closing_aggregate=77.0),
        MeritRecord(program_id="se-h12", year=2024, round_number=3, closing_aggregate=74.0),
        MeritRecord(program_id="me-h12", year=2022, round_number=None, closing_aggregate=70.0),
        MeritRecord(program_id="me-h12", year=2023, round_number=None, closing_aggregate=72.0),
        MeritRecord(program_id="me-h12", year=2024, round_number=None, closing_aggregate=74.0),
        MeritRecord(program_id="ee-rwp", year=2024, round_number=1, closing_aggregate=None,
                    closing_position=900),
    ]
    return rows

@pytest.fixture
def catalog(programs, history):
    return ProgramCatalog.build(programs, history)

def option(pid, closing, campus="H-12", group="Engineering"):
    return ProgramOption(id=pid, name=pid.upper(), campus=campus, school="S",
                         discipline_group=group, last_year_closing_aggregate=closing)

@pytest.fixture
def make_option():
    return option

@pytest.fixture
def interests():
    return UserInterests(discipline_scores={"Computing": 5, "Engineering": 4, "Business": 1},
                         preferred_campuses=["H-12", "Rawalpindi"],
                         risk_tolerance="Moderate")
