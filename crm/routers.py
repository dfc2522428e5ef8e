"""
URL mappings for the clinic backend API.

Salary, advance and payee routes are generated once per payee category;
each view receives the category as a keyword argument.  Trailing slashes
are deliberately omitted to match the front-end.
"""
from django.urls import include, path

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view
from .views import advances, health, ledger, payees, payments, users
from .views.dashboard import admin_dashboard

# (category, salary prefix, advance prefix, payee prefix)
CATEGORY_ROUTES = [
    ('doctor', 'doctor-salaries', 'doctor-advances', 'doctors'),
    ('staff', 'staff-salaries', 'staff-advances', 'staff'),
    ('patient', 'patient-salaries', 'patient-advances', 'patients'),
]

# Older front-end builds call the patient ledger "fees".
SALARY_ALIASES = [('patient', 'patient-fees')]


def salary_routes(category, prefix):
    kw = {'category': category}
    return [
        path(f'api/{prefix}', ledger.salary_list, kw),
        path(f'api/{prefix}/save-monthly-records', ledger.save_monthly_records, kw),
        path(f'api/{prefix}/carry-forward/<int:month>/<int:year>', ledger.carry_forward, kw),
        path(f'api/{prefix}/monthly-summary/<int:month>/<int:year>', ledger.monthly_summary, kw),
        path(f'api/{prefix}/payment', payments.record_payment, kw),
        path(f'api/{prefix}/payment/<int:pk>', payments.payment_detail, kw),
        path(f'api/{prefix}/ledger/<int:pk>', ledger.ledger_correction, kw),
        path(f'api/{prefix}/<int:payee_id>/history', payments.payment_history, kw),
    ]


def advance_routes(category, prefix):
    kw = {'category': category}
    return [
        path(f'api/{prefix}', advances.advances, kw),
        path(f'api/{prefix}/<int:pk>', advances.advance_detail, kw),
        path(f'api/{prefix}/payee/<int:payee_id>', advances.payee_advances, kw),
    ]


def payee_routes(category, prefix):
    kw = {'category': category}
    return [
        path(f'api/{prefix}', payees.payees, kw),
        path(f'api/{prefix}/<int:pk>', payees.payee_detail, kw),
    ]


urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout_view'),
    # Operators and audit
    path('api/user/profile', users.me),
    path('api/users', users.users),
    path('api/users/<int:pk>/role', users.set_role),
    path('api/admin/audit-log', users.audit_log),
    # Dashboard
    path('api/admin/dashboard', admin_dashboard),
]

for _category, _salary, _advance, _payee in CATEGORY_ROUTES:
    urlpatterns += salary_routes(_category, _salary)
    urlpatterns += advance_routes(_category, _advance)
    urlpatterns += payee_routes(_category, _payee)

for _category, _alias in SALARY_ALIASES:
    urlpatterns += salary_routes(_category, _alias)
