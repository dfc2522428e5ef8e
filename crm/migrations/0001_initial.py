import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def _money(**kwargs):
    return models.DecimalField(decimal_places=2, max_digits=12, **kwargs)


def _payee_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('name', models.CharField(max_length=255)),
        ('email', models.EmailField(blank=True, max_length=254)),
        ('phone', models.CharField(blank=True, max_length=32)),
        ('status', models.CharField(choices=[('Active', 'Active'), ('Inactive', 'Inactive')], db_index=True, default='Active', max_length=16)),
        ('payment_mode', models.CharField(default='Bank Transfer', max_length=50)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


def _settlement_fields(payee_model, column):
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('amount', _money()),
        ('payment_date', models.DateField(db_index=True)),
        ('payment_mode', models.CharField(default='Bank Transfer', max_length=50)),
        ('type', models.CharField(default='salary', max_length=50)),
        ('notes', models.TextField(blank=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('payee', models.ForeignKey(db_column=column, on_delete=django.db.models.deletion.CASCADE, related_name='settlements', to=payee_model)),
    ]


def _advance_fields(payee_model, column):
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('amount', _money()),
        ('date', models.DateField(db_index=True)),
        ('reason', models.TextField(blank=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('payee', models.ForeignKey(db_column=column, on_delete=django.db.models.deletion.CASCADE, related_name='advances', to=payee_model)),
    ]


def _ledger_fields(payee_model, column):
    zero = Decimal('0.00')
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('month', models.PositiveSmallIntegerField()),
        ('year', models.PositiveSmallIntegerField()),
        ('base_amount', _money(default=zero)),
        ('total_paid', _money(default=zero)),
        ('advance_amount', _money(default=zero)),
        ('carry_forward_from_previous', _money(default=zero)),
        ('carry_forward_to_next', _money(default=zero)),
        ('net_balance', _money(default=zero)),
        ('status', models.CharField(choices=[('Pending', 'Pending'), ('Paid', 'Paid')], default='Pending', max_length=16)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('payee', models.ForeignKey(db_column=column, on_delete=django.db.models.deletion.CASCADE, related_name='ledger', to=payee_model)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=[('super', 'Super Administrator'), ('admin', 'Administrator'), ('accountant', 'Accountant'), ('staff', 'Staff')], default='staff', max_length=16)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Doctor',
            fields=_payee_fields() + [
                ('specialization', models.CharField(blank=True, max_length=255)),
                ('salary', _money(default=Decimal('0.00'))),
                ('join_date', models.DateField(blank=True, null=True)),
            ],
            options={'db_table': 'doctors', 'ordering': ['name'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='Staff',
            fields=_payee_fields() + [
                ('role', models.CharField(blank=True, max_length=100)),
                ('department', models.CharField(blank=True, max_length=100)),
                ('salary', _money(default=Decimal('0.00'))),
                ('join_date', models.DateField(blank=True, null=True)),
            ],
            options={'db_table': 'staff', 'ordering': ['name'], 'verbose_name_plural': 'staff', 'abstract': False},
        ),
        migrations.CreateModel(
            name='Patient',
            fields=_payee_fields() + [
                ('monthly_fees', _money(default=Decimal('0.00'))),
                ('admission_date', models.DateField(blank=True, null=True)),
                ('guardian_name', models.CharField(blank=True, max_length=255)),
            ],
            options={'db_table': 'patients', 'ordering': ['name'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='DoctorSalarySettlement',
            fields=_settlement_fields('crm.doctor', 'doctor_id'),
            options={'db_table': 'doctor_salary_settlements', 'ordering': ['-payment_date', '-created_at'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='StaffSalarySettlement',
            fields=_settlement_fields('crm.staff', 'staff_id'),
            options={'db_table': 'staff_salary_settlements', 'ordering': ['-payment_date', '-created_at'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='PatientFeeSettlement',
            fields=_settlement_fields('crm.patient', 'patient_id'),
            options={'db_table': 'patient_fee_settlements', 'ordering': ['-payment_date', '-created_at'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='DoctorAdvance',
            fields=_advance_fields('crm.doctor', 'doctor_id'),
            options={'db_table': 'doctor_advance', 'ordering': ['-date', '-created_at'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='StaffAdvance',
            fields=_advance_fields('crm.staff', 'staff_id'),
            options={'db_table': 'staff_advance', 'ordering': ['-date', '-created_at'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='PatientAdvance',
            fields=_advance_fields('crm.patient', 'patient_id'),
            options={'db_table': 'patient_advance', 'ordering': ['-date', '-created_at'], 'abstract': False},
        ),
        migrations.CreateModel(
            name='DoctorMonthlySalary',
            fields=_ledger_fields('crm.doctor', 'doctor_id'),
            options={
                'db_table': 'doctor_monthly_salary',
                'indexes': [models.Index(fields=['year', 'month'], name='doctor_ledger_period_idx')],
                'constraints': [models.UniqueConstraint(fields=('payee', 'month', 'year'), name='uniq_doctor_month_year')],
            },
        ),
        migrations.CreateModel(
            name='StaffMonthlySalary',
            fields=_ledger_fields('crm.staff', 'staff_id'),
            options={
                'db_table': 'staff_monthly_salary',
                'indexes': [models.Index(fields=['year', 'month'], name='staff_ledger_period_idx')],
                'constraints': [models.UniqueConstraint(fields=('payee', 'month', 'year'), name='uniq_staff_month_year')],
            },
        ),
        migrations.CreateModel(
            name='PatientMonthlyFee',
            fields=_ledger_fields('crm.patient', 'patient_id'),
            options={
                'db_table': 'patient_monthly_fees',
                'indexes': [models.Index(fields=['year', 'month'], name='patient_ledger_period_idx')],
                'constraints': [models.UniqueConstraint(fields=('payee', 'month', 'year'), name='uniq_patient_month_year')],
            },
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.IntegerField(blank=True, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
                ],
            },
        ),
    ]
