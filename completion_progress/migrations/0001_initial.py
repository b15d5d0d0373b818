from django.db import migrations, models
import django.utils.timezone
import model_utils.fields
import opaque_keys.edx.django.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='BlockInstance',
            fields=[
                ('id', models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created', model_utils.fields.AutoCreatedField(default=django.utils.timezone.now, editable=False, verbose_name='created')),
                ('modified', model_utils.fields.AutoLastModifiedField(default=django.utils.timezone.now, editable=False, verbose_name='modified')),
                ('course_id', opaque_keys.edx.django.models.CourseKeyField(db_index=True, max_length=255)),
                ('page_type_pattern', models.CharField(default='course-view-*', max_length=64)),
                ('region', models.CharField(default='side-post', max_length=16)),
                ('weight', models.IntegerField(default=0)),
                ('config_data', models.TextField(blank=True, default='')),
            ],
            options={
                'ordering': ('weight', 'id'),
            },
        ),
    ]
