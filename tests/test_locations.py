"""위치 현황 API 테스트.

Location status API tests — Per (building, location) counts and latest
report dates.
"""

from httpx import AsyncClient

from tests.conftest import create_report, parse_time

URL = "/api/locations/status"


class TestLocationStatus:
    """위치별 신고 집계 테스트."""

    async def test_empty(self, client: AsyncClient):
        """신고가 없으면 빈 목록."""
        res = await client.get(URL)
        assert res.status_code == 200
        assert res.json() == {"locationStatus": []}

    async def test_counts_per_location(self, client: AsyncClient):
        """(building, location) 쌍별 개수와 최신 일시."""
        for _ in range(3):
            latest = await create_report(client, building="A", location="A-lobby")
        await create_report(client, building="A", location="A-roof")

        res = await client.get(URL)
        assert res.status_code == 200
        statuses = res.json()["locationStatus"]
        by_key = {(s["building"], s["location"]): s for s in statuses}
        assert set(by_key) == {("A", "A-lobby"), ("A", "A-roof")}
        assert by_key[("A", "A-lobby")]["reportCount"] == 3
        assert by_key[("A", "A-roof")]["reportCount"] == 1
        assert parse_time(by_key[("A", "A-lobby")]["latestReportDate"]) == parse_time(latest["report"]["createdAt"])

    async def test_same_location_code_in_other_building(self, client: AsyncClient):
        """동이 다르면 같은 구역 코드라도 별도 집계."""
        await create_report(client, building="A", location="parking-1")
        await create_report(client, building="B", location="parking-1")

        res = await client.get(URL)
        statuses = res.json()["locationStatus"]
        assert len(statuses) == 2
        assert all(s["reportCount"] == 1 for s in statuses)

    async def test_status_changes_do_not_affect_counts(self, client: AsyncClient):
        """상태와 무관하게 모든 신고를 집계."""
        created = await create_report(client, building="C", location="C-gym")
        await create_report(client, building="C", location="C-gym")
        await client.patch(f"/api/reports/{created['report']['id']}", json={"status": "rejected"})

        res = await client.get(URL)
        assert res.json()["locationStatus"][0]["reportCount"] == 2


class TestHealth:
    """헬스 체크 테스트."""

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}
