from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from apps.orders.models import measurement_fields_for

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    measurement_fields = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "name", "email", "phone", "role", "status", "gender", "created_at", "measurement_fields"]
        read_only_fields = ["id", "name", "email", "phone", "role", "status", "gender", "created_at"]

    def get_measurement_fields(self, obj):
        """Measurement keys the tailor's order form collects, by the tailor's gender setting."""
        return list(measurement_fields_for(obj.gender))


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    class Meta:
        model = User
        fields = ["name", "email", "phone", "password", "gender"]

    def validate_email(self, value):
        value = User.objects.normalize_email(value).lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("User already exists")
        return value

    def validate(self, attrs):
        candidate = User(email=attrs.get("email"), name=attrs.get("name", ""))
        validate_password(attrs["password"], user=candidate)
        return attrs

    def create(self, validated_data):
        # Self-registration always yields a tailor awaiting approval.
        return User.objects.create_user(
            role=User.ROLE_TAILOR,
            status=User.STATUS_PENDING,
            **validated_data,
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, value):
        return value.strip().lower()


class TailorStatusSerializer(serializers.Serializer):
    tailor_id = serializers.UUIDField()
    status = serializers.ChoiceField(choices=User.STATUS_CHOICES)
