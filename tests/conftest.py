from pathlib import Path

import pytest

from skytally.ingestors.reference_tables import load_reference_tables

REFERENCE_FILES = {
    "ICAOList.csv": (
        "Designator,Class,Engine,Model\n"
        'A388,L4J,4/J,"AIRBUS, A-380-800"\n'
        'B738,L2J,2/J,"BOEING, 737-800"\n'
        'C130,L4T,4/T,"LOCKHEED, C-130 Hercules"\n'
    ),
    "Airlines.csv": (
        "Company,Country,Telephony,Code\n"
        "Singapore Airlines,Singapore,SINGAPORE,SIA\n"
        "Qantas Airways,Australia,QANTAS,QFA\n"
        "Garuda Indonesia,Indonesia,INDONESIA,GIA (note)\n"
    ),
    "ICAOHexRange.csv": (
        "760000,767FFF,Singapore\n"
        "7C0000,7FFFFF,Australia\n"
        "8A0000,8AFFFF,Indonesia\n"
    ),
    "RegPrefixList.csv": (
        "Country,Prefix,Comment\n"
        "Singapore,9V-,\n"
        "Indonesia,PK-,\n"
        "Australia,VH-,\n"
    ),
    "MilICAOOperatorLookUp.csv": (
        "Operator,Code\n"
        "Republic of Singapore Air Force,RSAF\n"
        "Royal Australian Air Force,ASY\n"
        "Disbanded Squadron,\n"
    ),
}


@pytest.fixture
def reference_dir(tmp_path: Path) -> Path:
    for name, content in REFERENCE_FILES.items():
        (tmp_path / name).write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def tables(reference_dir: Path):
    return load_reference_tables(reference_dir)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
