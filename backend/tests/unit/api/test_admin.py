"""
Unit Tests for Admin API Endpoints
"""
import pytest
from httpx import AsyncClient

from trackerpro.core.config import settings
from trackerpro.models.user import UserRole, UserStatus

from conftest import make_auth_headers


class TestAdminAccess:
    """Admin routes require an admin bearer token"""

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient):
        response = await client.get('/api/v1/admin/pending-registrations')

        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, client: AsyncClient, auth_headers):
        response = await client.get('/api/v1/admin/users', headers=auth_headers)

        assert response.status_code == 403
        assert response.json()['message'] == 'Access denied. Admin privileges required.'

    @pytest.mark.asyncio
    async def test_token_of_deleted_user(self, client: AsyncClient, admin_auth_headers, test_user):
        headers = make_auth_headers(test_user)
        await client.delete(f'/api/v1/admin/users/{test_user.id}', headers=admin_auth_headers)

        response = await client.get('/api/v1/auth/me', headers=headers)

        assert response.status_code == 401


class TestApprovalEndpoints:

    @pytest.mark.asyncio
    async def test_pending_registrations(self, client: AsyncClient, admin_auth_headers, pending_user, test_user):
        response = await client.get('/api/v1/admin/pending-registrations', headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['success'] is True
        assert data['count'] == 1
        assert data['data'][0]['id'] == pending_user.id

    @pytest.mark.asyncio
    async def test_approve_user(self, client: AsyncClient, admin_auth_headers, pending_user):
        response = await client.post(
            f'/api/v1/admin/approve-user/{pending_user.id}', headers=admin_auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data['message'] == 'User approved successfully!'
        assert data['user']['status'] == 'ACTIVE'

    @pytest.mark.asyncio
    async def test_approve_twice(self, client: AsyncClient, admin_auth_headers, pending_user):
        url = f'/api/v1/admin/approve-user/{pending_user.id}'
        await client.post(url, headers=admin_auth_headers)

        response = await client.post(url, headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()['message'] == 'Only pending users can be approved'

    @pytest.mark.asyncio
    async def test_approve_missing_user(self, client: AsyncClient, admin_auth_headers):
        response = await client.post('/api/v1/admin/approve-user/999999', headers=admin_auth_headers)

        assert response.status_code == 404
        assert response.json()['message'] == 'User not found'

    @pytest.mark.asyncio
    async def test_reject_user(self, client: AsyncClient, admin_auth_headers, pending_user):
        response = await client.post(
            f'/api/v1/admin/reject-user/{pending_user.id}', headers=admin_auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data['message'] == 'User rejected successfully!'
        assert data['user']['status'] == 'REJECTED'

    @pytest.mark.asyncio
    async def test_register_approve_login_flow(self, client: AsyncClient, admin_auth_headers):
        register = await client.post('/api/v1/auth/register', json={
            'firstName': 'John', 'lastName': 'Smith', 'email': 'john@x.com',
            'password': 'pw123', 'confirmPassword': 'pw123',
            'mobileNo': '9000000001', 'roleCategory': 'STUDENT',
        })
        user_id = register.json()['user']['id']
        credentials = {'email': 'john@x.com', 'password': 'pw123'}

        refused = await client.post('/api/v1/auth/login', json=credentials)
        assert refused.status_code == 403
        assert 'pending approval' in refused.json()['message']

        approved = await client.post(f'/api/v1/admin/approve-user/{user_id}', headers=admin_auth_headers)
        assert approved.json()['user']['status'] == 'ACTIVE'

        accepted = await client.post('/api/v1/auth/login', json=credentials)
        assert accepted.status_code == 200
        assert accepted.json()['success'] is True


class TestUserManagement:

    @pytest.mark.asyncio
    async def test_list_users_excludes_admins(self, client: AsyncClient, admin_auth_headers,
                                              test_user, pending_user):
        response = await client.get('/api/v1/admin/users', headers=admin_auth_headers)

        data = response.json()
        assert data['count'] == 2
        assert {u['id'] for u in data['data']} == {test_user.id, pending_user.id}
        assert all(u['role'] != 'ADMIN' for u in data['data'])

    @pytest.mark.asyncio
    async def test_list_users_all_filter(self, client: AsyncClient, admin_auth_headers, test_user):
        response = await client.get('/api/v1/admin/users?role=all', headers=admin_auth_headers)

        assert response.json()['count'] == 1

    @pytest.mark.asyncio
    async def test_list_users_by_role(self, client: AsyncClient, admin_auth_headers,
                                      test_user, pending_user):
        response = await client.get('/api/v1/admin/users?role=faculty', headers=admin_auth_headers)

        data = response.json()
        assert [u['id'] for u in data['data']] == [pending_user.id]

    @pytest.mark.asyncio
    async def test_list_users_unknown_role(self, client: AsyncClient, admin_auth_headers):
        response = await client.get('/api/v1/admin/users?role=wizard', headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()['message'] == 'Invalid role: wizard'

    @pytest.mark.asyncio
    async def test_update_user(self, client: AsyncClient, admin_auth_headers, test_user):
        response = await client.put(
            f'/api/v1/admin/users/{test_user.id}',
            headers=admin_auth_headers,
            json={'firstName': 'Renamed', 'roleCategory': 'HR'}
        )

        assert response.status_code == 200
        user = response.json()['user']
        assert user['firstName'] == 'Renamed'
        assert user['role'] == 'HR'
        assert user['email'] == test_user.email

    @pytest.mark.asyncio
    async def test_update_blank_first_name(self, client: AsyncClient, admin_auth_headers, test_user):
        response = await client.put(
            f'/api/v1/admin/users/{test_user.id}',
            headers=admin_auth_headers,
            json={'firstName': '  '}
        )

        assert response.status_code == 422
        assert response.json()['errors'][0]['field'] == 'firstName'

    @pytest.mark.asyncio
    async def test_update_duplicate_email(self, client: AsyncClient, admin_auth_headers,
                                          test_user, pending_user):
        response = await client.put(
            f'/api/v1/admin/users/{test_user.id}',
            headers=admin_auth_headers,
            json={'email': pending_user.email}
        )

        assert response.status_code == 400
        assert response.json()['message'] == 'Email already exists'

    @pytest.mark.asyncio
    async def test_toggle_user_status(self, client: AsyncClient, admin_auth_headers, test_user):
        url = f'/api/v1/admin/toggle-user-status/{test_user.id}'

        first = await client.post(url, headers=admin_auth_headers)
        second = await client.post(url, headers=admin_auth_headers)

        assert first.json()['message'] == 'User status updated successfully!'
        assert first.json()['user']['status'] == 'INACTIVE'
        assert second.json()['user']['status'] == 'ACTIVE'

    @pytest.mark.asyncio
    async def test_toggle_admin_refused(self, client: AsyncClient, admin_auth_headers, admin_user):
        response = await client.post(
            f'/api/v1/admin/toggle-user-status/{admin_user.id}', headers=admin_auth_headers
        )

        assert response.status_code == 400
        assert response.json()['message'] == 'Cannot modify admin user status'

    @pytest.mark.asyncio
    async def test_delete_user(self, client: AsyncClient, admin_auth_headers, test_user):
        response = await client.delete(f'/api/v1/admin/users/{test_user.id}', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json() == {'success': True, 'message': 'User deleted successfully!'}

        listing = await client.get('/api/v1/admin/users', headers=admin_auth_headers)
        assert listing.json()['count'] == 0

    @pytest.mark.asyncio
    async def test_delete_admin_refused(self, client: AsyncClient, admin_auth_headers, admin_user):
        response = await client.delete(f'/api/v1/admin/users/{admin_user.id}', headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()['message'] == 'Cannot delete admin user'

    @pytest.mark.asyncio
    async def test_delete_missing_user(self, client: AsyncClient, admin_auth_headers):
        response = await client.delete('/api/v1/admin/users/999999', headers=admin_auth_headers)

        assert response.status_code == 404


class TestDashboardStats:

    @pytest.mark.asyncio
    async def test_dashboard_stats(self, client: AsyncClient, admin_auth_headers, user_factory):
        await user_factory(role=UserRole.STUDENT)
        await user_factory(role=UserRole.STUDENT)
        await user_factory(role=UserRole.FACULTY)
        await user_factory(role=UserRole.HR)
        await user_factory(role=UserRole.HR, status=UserStatus.INACTIVE)
        await user_factory(role=UserRole.STUDENT, status=UserStatus.PENDING)
        await user_factory(role=UserRole.HR, status=UserStatus.PENDING)

        response = await client.get('/api/v1/admin/dashboard-stats', headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()['data']
        assert data == {
            'totalStudents': 2,
            'totalFaculty': 1,
            'totalHR': 1,
            'pendingRequests': 2,
            'activeBatches': settings.DASHBOARD_ACTIVE_BATCHES,
            'totalUsers': 4,
        }
        assert data['totalUsers'] == data['totalStudents'] + data['totalFaculty'] + data['totalHR']
