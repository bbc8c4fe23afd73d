# tests/test_routes.py

import io

from marketshare.analyzer.schema import EXPECTED_LAYOUT_MESSAGE

SUBJECT = "Russ Lyon Sotheby's International Realty"


def upload(client, files, query=''):
    data = {'files': [(io.BytesIO(content), name) for name, content in files]}
    return client.post(f'/api/process-files{query}', data=data, content_type='multipart/form-data')


def test_connection_probe(client):
    response = client.get('/api/test')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


def test_process_xlsx(client, xlsx_bytes, mkt_pct_rows):
    response = upload(client, [('Scottsdale_Luxury.xlsx', xlsx_bytes(mkt_pct_rows))])

    assert response.status_code == 200
    payload = response.get_json()
    assert payload['processedData']['labels'][:2] == [SUBJECT, 'HomeSmart']
    assert payload['processedData']['values'][:2] == [15.6, 9.0]
    assert payload['derivedMetrics']['gap'] == 6.6
    assert payload['insights']['summary'][1].startswith('6.6 percentage points ahead of')
    assert payload['additionalMetrics'] == {
        'totalSales': 1250,
        'averagePrice': '$1,850,000',
        'daysOnMarket': 84.0,
        'totalOffices': 12,
        'contributingAgents': 340,
        'pricePerSqft': '$612',
        'closedListRatio': '96.2%',
    }
    assert payload['fileName'] == 'Scottsdale Luxury'
    assert payload['templateType'] == 'market_share'


def test_process_csv_with_template(client):
    csv_data = (
        ",Brand,,,,,,,Mkt %\n"
        ",HomeSmart,,,,,,,0.09\n"
        ",Sotheby's Realty,,,,,,,0.156\n"
    ).encode('utf-8')

    response = upload(client, [('carefree.csv', csv_data)], query='?template=other_insights')

    assert response.status_code == 200
    payload = response.get_json()
    assert payload['processedData'] == {'labels': [SUBJECT, 'HomeSmart'], 'values': [15.6, 9.0]}
    assert payload['templateType'] == 'other_insights'
    assert payload['insights']['title'] == 'Other Market Insights'


def test_only_first_file_is_processed(client):
    first = b",Brand,,,,,,,Mkt %\n,HomeSmart,,,,,,,9%\n"
    second = b",Brand,,,,,,,Mkt %\n,Homie,,,,,,,2%\n"

    response = upload(client, [('a.csv', first), ('b.csv', second)])

    assert response.get_json()['processedData']['labels'] == ['HomeSmart']


def test_header_only_file_returns_no_data(client):
    response = upload(client, [('empty.csv', b",Brand,,,,,,,Mkt %\n")])

    assert response.status_code == 200
    payload = response.get_json()
    assert payload['processedData'] == {'labels': [], 'values': []}
    assert payload['additionalMetrics']['totalSales'] == 0
    assert 'pricePerSqft' not in payload['additionalMetrics']


def test_missing_file_is_rejected(client):
    response = client.post('/api/process-files', data={}, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json()['error'] == EXPECTED_LAYOUT_MESSAGE


def test_wrong_extension_is_rejected(client):
    response = upload(client, [('report.pdf', b'%PDF-1.4')])

    assert response.status_code == 400
    assert response.get_json()['details'] == ['Only CSV and Excel files are accepted.']


def test_unreadable_workbook_is_rejected(client):
    response = upload(client, [('broken.xlsx', b'not a workbook')])

    assert response.status_code == 400
    payload = response.get_json()
    assert payload['error'] == EXPECTED_LAYOUT_MESSAGE
    assert 'could not be read as a spreadsheet' in payload['details'][0]


def test_unknown_template_is_rejected(client):
    data = {'files': [(io.BytesIO(b",Brand\n"), 'a.csv')], 'template': 'pie_only'}
    response = client.post('/api/process-files', data=data, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json()['details'] == ['Unknown template type.']


def test_oversized_upload_is_rejected(app, client):
    app.config['MAX_CONTENT_LENGTH'] = 1024 * 1024

    response = upload(client, [('big.csv', b'x' * (1024 * 1024 + 1))])

    assert response.status_code == 413
    assert response.get_json()['details'] == ['File size exceeds 1MB limit.']
