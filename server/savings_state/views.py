from rest_framework.parsers import JSONParser
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import BalanceRecord
from .serializers import BalanceRecordSerializer, BalanceStateWriteSerializer


class StateView(APIView):
    parser_classes = [JSONParser]

    def get(self, request):
        record = BalanceRecord.current()
        if record is None:
            return Response({})
        return Response(BalanceRecordSerializer(record).data)

    def put(self, request):
        serializer = BalanceStateWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = serializer.save()
        return Response(BalanceRecordSerializer(record).data)
