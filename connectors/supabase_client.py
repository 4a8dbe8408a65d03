"""
Supabase (PostgREST) Connector - lecture des tables de l'ancien backend
"""
import requests
import time
import logging
from typing import Dict, List, Optional, Any
from urllib.parse import urljoin

logger = logging.getLogger(__name__)


class SupabaseAPIClient:
    """Client REST en lecture seule: GET /rest/v1/<table>?select=*"""

    def __init__(self, api_url: str, api_key: str, page_size: int = 1000):
        self.api_url = api_url.strip().rstrip('/')
        self.page_size = page_size
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
            "Range-Unit": "items",
            "Prefer": "count=exact",
        }

        self.max_retries = 5
        self.retry_delay = 2
        self.rate_limit_delay = 0.2  # entre deux pages

        logger.info(f"SupabaseAPIClient initialized: {self.api_url}")

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Dict = None,
        headers: Dict = None,
        timeout: int = 60
    ) -> requests.Response:
        """HTTP request with retry logic"""
        url = urljoin(self.api_url + '/', endpoint.lstrip('/'))
        request_headers = dict(self.headers)
        if headers:
            request_headers.update(headers)

        for attempt in range(self.max_retries):
            try:
                response = requests.request(
                    method=method,
                    url=url,
                    headers=request_headers,
                    params=params,
                    timeout=timeout
                )
                response.raise_for_status()
                return response

            except requests.exceptions.HTTPError as e:
                if e.response.status_code in [429, 500, 502, 503, 504] and attempt < self.max_retries - 1:
                    wait_time = self.retry_delay * (2 ** attempt)
                    logger.warning(f"HTTP {e.response.status_code}, retrying in {wait_time}s... (attempt {attempt + 1}/{self.max_retries})")
                    time.sleep(wait_time)
                else:
                    logger.error(f"API Error ({url}): {e}")
                    raise

            except requests.exceptions.RequestException as e:
                logger.error(f"Connection Error ({url}): {e}")
                raise

    def get_rows(self, table: str, offset: int = 0, limit: Optional[int] = None) -> Dict[str, Any]:
        """
        Une page d'une table

        Returns:
            {
                'rows': List[Dict],
                'total': Optional[int]   # depuis Content-Range, None si absent
            }
        """
        limit = limit or self.page_size
        response = self._make_request(
            "GET",
            f"/rest/v1/{table}",
            params={'select': '*', 'order': 'id.asc'},
            headers={'Range': f"{offset}-{offset + limit - 1}"},
        )
        rows = response.json()
        if not isinstance(rows, list):
            rows = []

        return {
            'rows': rows,
            'total': self._parse_total(response.headers.get('Content-Range')),
        }

    def get_all_rows(self, table: str, progress_callback: callable = None) -> List[Dict]:
        """
        Toutes les lignes d'une table, page par page (en-têtes Range)
        """
        all_rows = []
        offset = 0

        while True:
            page = self.get_rows(table, offset=offset)
            rows = page['rows']
            all_rows.extend(rows)

            if progress_callback:
                progress_callback(table, len(all_rows), page['total'])

            if len(rows) < self.page_size:
                break
            if page['total'] is not None and len(all_rows) >= page['total']:
                break

            offset += len(rows)
            time.sleep(self.rate_limit_delay)

        logger.info(f"✅ Fetched {len(all_rows)} rows from {table}")
        return all_rows

    def test_connection(self) -> Dict[str, Any]:
        """Vérifie l'accès à l'API REST"""
        try:
            response = self._make_request(
                "GET", "/rest/v1/products",
                params={'select': 'id'},
                headers={'Range': '0-0'},
                timeout=10
            )
            return {
                'success': True,
                'message': 'Supabase API connection successful',
                'status_code': response.status_code
            }
        except Exception as e:
            return {
                'success': False,
                'message': f'Supabase API connection failed: {str(e)}'
            }

    @staticmethod
    def _parse_total(content_range: Optional[str]) -> Optional[int]:
        """'0-999/2345' -> 2345, '*/0' -> 0"""
        if not content_range or '/' not in content_range:
            return None
        total = content_range.split('/')[-1]
        return int(total) if total.isdigit() else None
