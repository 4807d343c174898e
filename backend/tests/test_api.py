from pathlib import Path
import sys

from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from artifact_catalog.main import app


client = TestClient(app)


def _record(path, name, repo="libs-release", size=100, created="2024-01-01T00:00:00Z"):
    return {
        "name": name,
        "path": path,
        "repo": repo,
        "size": size,
        "created": created,
        "modified": created,
        "updated": created,
        "createdBy": "jenkins",
        "modifiedBy": "jenkins",
        "updatedBy": "jenkins",
        "sha1": "a94a8fe5ccb19ba61c4c0873d391e987982fbbd3",
        "md5": "5d41402abc4b2a76b9719d911017c592",
    }


INVENTORY = [
    _record("pay/feature/login/42/libs/auth", "auth.jar", size=100),
    _record("pay/feature/login/42/docs/guide.pdf", "guide.pdf", size=20),
    _record("pay/feature/login/9/libs/auth", "auth.jar", size=90, created="2024-01-05T00:00:00Z"),
    _record("web/release/main/3/site.zip", "site.zip", repo="libs-snapshot", size=500),
    _record("stray.txt", "stray.txt", size=1),
]


def test_health():
    response = client.get('/health')
    assert response.status_code == 200
    assert response.json()['status'] == 'ok'


def test_query_defaults():
    response = client.post('/api/builds/query', json={'artifacts': INVENTORY})
    assert response.status_code == 200
    payload = response.json()

    assert payload['page'] == 0
    assert payload['page_size'] == 12
    assert payload['page_count'] == 1
    assert payload['total_filtered'] == 3
    assert [b['module_name'] for b in payload['builds']] == ['pay', 'pay', 'web']
    assert payload['statistics']['total'] == {
        'total_builds': 3,
        'total_artifacts': 4,
        'total_size': 710,
        'total_modules': 2,
    }
    assert payload['repos'] == ['libs-release', 'libs-snapshot']
    assert payload['modules'] == ['pay', 'web']
    assert payload['builds'][0]['artifacts'][0]['createdBy'] == 'jenkins'


def test_query_filter_sort_and_page():
    response = client.post(
        '/api/builds/query',
        json={
            'artifacts': INVENTORY,
            'repo_filter': 'libs-release',
            'sort_field': 'buildNumber',
            'sort_order': 'asc',
            'page_size': 1,
            'page': 1,
        },
    )
    assert response.status_code == 200
    payload = response.json()

    assert payload['total_filtered'] == 2
    assert payload['page_count'] == 2
    assert [b['build_number'] for b in payload['builds']] == ['42']
    assert payload['statistics']['filtered']['total_builds'] == 2
    assert payload['statistics']['total']['total_builds'] == 3


def test_query_search():
    response = client.post('/api/builds/query', json={'artifacts': INVENTORY, 'search_term': 'GUIDE'})
    assert response.status_code == 200
    builds = response.json()['builds']
    assert [b['id'] for b in builds] == ['pay|feature|login|42|libs-release']


def test_query_empty_inventory():
    response = client.post('/api/builds/query', json={'artifacts': []})
    assert response.status_code == 200
    payload = response.json()
    assert payload['builds'] == []
    assert payload['statistics']['total']['total_builds'] == 0
    assert payload['statistics']['filtered']['total_size'] == 0


def test_query_rejects_invalid_paging():
    assert client.post('/api/builds/query', json={'page': -1}).status_code == 422
    assert client.post('/api/builds/query', json={'page_size': 0}).status_code == 422
    assert client.post('/api/builds/query', json={'page_size': 100000}).status_code == 422
    assert client.post('/api/builds/query', json={'sort_field': 'sha1'}).status_code == 422


def test_query_rejects_negative_size():
    bad = _record("pay/feature/login/42/x", "x", size=-5)
    assert client.post('/api/builds/query', json={'artifacts': [bad]}).status_code == 422


def test_build_tree():
    response = client.post(
        '/api/builds/tree',
        json={'artifacts': INVENTORY, 'build_id': 'pay|feature|login|42|libs-release'},
    )
    assert response.status_code == 200
    payload = response.json()

    assert payload['build']['total_size'] == 120
    assert payload['file_count'] == 2
    assert payload['folder_count'] == 2

    tree = payload['tree']
    assert tree['name'] == 'root'
    assert tree['full_path'] == ''
    assert [child['name'] for child in tree['children']] == ['docs', 'libs']
    libs = tree['children'][1]
    assert libs['is_file'] is False
    assert libs['size'] is None
    auth = libs['children'][0]
    assert auth['name'] == 'auth.jar'
    assert auth['is_file'] is True
    assert auth['size'] == 100
    assert auth['children'] == []


def test_build_tree_unknown_build():
    response = client.post('/api/builds/tree', json={'artifacts': INVENTORY, 'build_id': 'nope'})
    assert response.status_code == 404


def test_query_sorts_far_past_and_future_dates():
    inventory = [
        _record("svc/release/main/1/a.jar", "a.jar", created="2024-05-01T00:00:00Z"),
        _record("svc/release/main/2/a.jar", "a.jar", created="2999-01-01T00:00:00Z"),
        _record("svc/release/main/3/a.jar", "a.jar", created="1600-01-01T00:00:00Z"),
    ]
    response = client.post(
        '/api/builds/query',
        json={'artifacts': inventory, 'sort_field': 'latestCreated', 'sort_order': 'desc'},
    )
    assert response.status_code == 200
    assert [b['build_number'] for b in response.json()['builds']] == ['2', '1', '3']
