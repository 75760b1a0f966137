import django.db.models.deletion
import newsmapper.custom_storages
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Newspaper',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('date', models.DateField()),
                ('pdf', models.FileField(storage=newsmapper.custom_storages.select_uploads_storage, upload_to='newspapers/')),
                ('cover_image_url', models.TextField(blank=True)),
                ('page_count', models.PositiveIntegerField(default=0)),
                ('is_published', models.BooleanField(default=False)),
                ('published_at', models.DateTimeField(blank=True, null=True)),
                ('view_count', models.PositiveIntegerField(default=0)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='newspapers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-date', '-uploaded_at'],
            },
        ),
        migrations.CreateModel(
            name='MappedArea',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('page_number', models.PositiveIntegerField()),
                ('x', models.FloatField()),
                ('y', models.FloatField()),
                ('width', models.FloatField()),
                ('height', models.FloatField()),
                ('headline', models.CharField(blank=True, max_length=300)),
                ('category', models.CharField(choices=[('politics', 'Politics'), ('sports', 'Sports'), ('business', 'Business'), ('entertainment', 'Entertainment'), ('local', 'Local'), ('other', 'Other')], default='other', max_length=20)),
                ('extracted_image_url', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('newspaper', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mapped_areas', to='newsmapper.newspaper')),
            ],
            options={
                'ordering': ['pk'],
            },
        ),
    ]
