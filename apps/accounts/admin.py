from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import Person, User


class PersonInline(admin.StackedInline):
    model = Person
    extra = 0
    fields = ["first_name", "last_name", "public_name", "email"]


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["username", "email", "role", "is_staff", "is_active"]
    list_filter = ["role", "is_staff", "is_superuser", "is_active"]
    search_fields = ["username", "email", "first_name", "last_name"]
    inlines = [PersonInline]
    fieldsets = BaseUserAdmin.fieldsets + ((_("Conference"), {"fields": ("role",)}),)
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "email", "role", "password1", "password2"),
            },
        ),
    )


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ["__str__", "email", "user", "created_at"]
    search_fields = ["public_name", "first_name", "last_name", "email"]
    raw_id_fields = ["user"]
