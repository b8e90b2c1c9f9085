from django import forms

from .models import Task


class TaskForm(forms.ModelForm):
    class Meta:
        model = Task
        fields = [
            "title",
            "description",
            "status",
            "priority",
            "room",
            "assigned_to",
            "due_date",
        ]

    def clean_title(self):
        return self.cleaned_data["title"].strip()
