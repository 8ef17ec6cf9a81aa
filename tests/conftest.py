import pytest
from fastapi.testclient import TestClient

from app import app
from services.student_data import FileSource, StudentStore, get_student_store

# 14 columns: id, term, student_id, middle_name, first_name, birth_date, hometown,
# gender, honors_rank, major, class_name, gpa, school, level
SAMPLE_CSV = """\
1,2024.2B,20201234,Nguyễn Văn,An,01/02/2002,Hà Nội,Nam,Giỏi,Kỹ thuật máy tính,KTMT-01,3.45,Trường CNTT,Đại học
2,2024.2B,20205678,Trần Thị,An,15/08/2002,Nam Định,Nữ,Xuất sắc,Khoa học máy tính,KHMT-02,3.71,Trường CNTT,Đại học
3,2024.2B,20191111,Lê Minh,Hoàng,23/11/2001,Hải Phòng,Nam,Khá,Cơ khí,CK-03,2.98,Trường Cơ khí,Đại học
4,2024.2B,20209999,Phạm Thu,Hà
5,2024.2B,12345,Đỗ Minh,Huy,02/03/2002,Huế,Nam,Giỏi,Điện tử,DT-01,3.20,Trường Điện,Kỹ sư

6,2024.2B,20186666,Vũ Đức,Tùng,09/09/2000,Thái Bình,Nam,Trung bình,Hóa học,HH-01,2.31,Trường Hóa,Đại học,EXTRA
"""


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MemorySource:
    """In-memory CSV source that counts reads and can be told to fail."""

    def __init__(self, text: str = ""):
        self.text = text
        self.reads = 0
        self.error: Exception | None = None

    def read(self) -> str:
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.text


def make_row(record_id: str, student_id: str, middle_name: str, first_name: str) -> str:
    return ",".join(
        [record_id, "2024.2B", student_id, middle_name, first_name, "01/01/2002", "Hà Nội", "Nam",
         "Giỏi", "Tin học", "TH-01", "3.00", "Trường CNTT", "Đại học"]
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def store(csv_path, clock):
    return StudentStore(FileSource(csv_path), ttl_seconds=300, clock=clock)


@pytest.fixture
def client_for():
    """Build a TestClient whose routes use the given store."""

    def _make(store: StudentStore) -> TestClient:
        app.dependency_overrides[get_student_store] = lambda: store
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_for, store):
    with client_for(store) as c:
        yield c
