from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser

class CustomUserAdmin(UserAdmin):
    model = CustomUser
    list_display = ('email', 'get_full_name', 'role', 'must_reset_password', 'is_active')
    list_filter = ('role', 'is_active', 'must_reset_password')
    ordering = ('email',)
    search_fields = ('email', 'name', 'phone')

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Personal info', {'fields': ('name', 'phone', 'role')}),
        ('Security', {'fields': ('must_reset_password',)}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'role', 'is_active')}
        ),
    )

admin.site.register(CustomUser, CustomUserAdmin)
