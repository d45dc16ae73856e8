# budget_backend/urls.py
from django.contrib import admin
from django.urls import path, include

from budgeting.views import health

urlpatterns = [
    path('', health, name='health'),
    path('admin/', admin.site.urls),
    path('', include('budgeting.urls')),  # all api/... routes
]
