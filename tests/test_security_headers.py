def test_security_headers(client):
    """Every JSON/API response carries the hardening headers."""
    response = client.get('/health')
    assert response.headers['X-Frame-Options'] == 'SAMEORIGIN'
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['Referrer-Policy'] == 'strict-origin-when-cross-origin'
    assert 'max-age=31536000' in response.headers['Strict-Transport-Security']


def test_home_redirects_to_health(client):
    response = client.get('/')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/health')
